"""
Asset register modules.

Thin glue between stored asset records and the pure depreciation engine:
DTOs, ORM models, read selectors, boundary conversion helpers and a
service facade.
"""
