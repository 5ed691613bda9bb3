"""
envbind: bind environment variables into typed dataclass records.

Walks (possibly nested) dataclasses, derives an upper-case lookup key per
field, and converts the textual value into the field's annotated type.
A small loader populates the process environment from `.env` files.
"""
