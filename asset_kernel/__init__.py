"""
Asset Kernel

Shared foundation for the asset register's depreciation stack:
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging with context propagation
- Injectable clock
- SQLAlchemy declarative base for the persistence boundary
"""

__version__ = "0.1.0"
