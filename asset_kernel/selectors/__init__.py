"""Read-only query selectors."""

from asset_kernel.selectors.base import BaseSelector

__all__ = ["BaseSelector"]
