"""
Typed Exception Hierarchy for the Asset Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the depreciation engine (report exports, the capital-improvement
form, batch seeding) must translate failures into user-facing messages.
Parsing message strings for that is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        schedule = compute_annual_schedule(inp)
    except Exception as e:
        if "useful life" in str(e):  # FRAGILE - message might change
            ...

Example - RIGHT way (what this module enables):
    try:
        schedule = compute_annual_schedule(inp)
    except InvalidInputError as e:
        api_response(code=e.code, field=e.field, reason=e.reason)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from AssetKernelError:

    AssetKernelError (base)
    |
    +-- DepreciationError
    |   +-- InvalidInputError
    |   +-- UnsupportedMethodError
    |   +-- OutOfRangeQueryError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                 | When Raised
----------------|----------------------|------------------------------------------
Depreciation    | INVALID_INPUT        | Non-positive cost or life, salvage out of
                |                      | range, improvement before in-service date
                | UNSUPPORTED_METHOD   | Method string is not one of the four
                | OUT_OF_RANGE_QUERY   | Schedule/query beyond the supported span
----------------|----------------------|------------------------------------------
Configuration   | CONFIGURATION_ERROR  | Settings file missing keys or malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

1. CATCH SPECIFIC EXCEPTIONS:

    try:
        value = book_value_at(inp, as_of)
    except OutOfRangeQueryError as e:
        notify_user(f"{e.requested} is beyond {e.limit}")
    except DepreciationError as e:
        log.error(f"Depreciation failed: {e.code}")

2. NEVER RETRY:

    Depreciation is a pure computation.  A failure on given inputs fails
    identically on every retry.  Fix the inputs instead.
"""


class AssetKernelError(Exception):
    """
    Base exception for all asset kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "ASSET_KERNEL_ERROR"


# Depreciation engine exceptions


class DepreciationError(AssetKernelError):
    """Base exception for depreciation engine errors."""

    code: str = "DEPRECIATION_ERROR"


class InvalidInputError(DepreciationError):
    """A depreciation parameter is malformed or out of range."""

    code: str = "INVALID_INPUT"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} ({value!r}): {reason}")


class UnsupportedMethodError(DepreciationError):
    """Depreciation method is not one of the supported methods."""

    code: str = "UNSUPPORTED_METHOD"

    def __init__(self, method: object, supported: tuple[str, ...] = ()):
        self.method = method
        self.supported = supported
        message = f"Unsupported depreciation method: {method!r}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)


class OutOfRangeQueryError(DepreciationError):
    """A schedule or point query reaches past the supported span."""

    code: str = "OUT_OF_RANGE_QUERY"

    def __init__(self, requested: str, limit: str):
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"Query for {requested} is outside the supported range (limit {limit})"
        )


# Configuration exceptions


class ConfigurationError(AssetKernelError):
    """Depreciation settings could not be loaded or are malformed."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration {path}: {reason}")
