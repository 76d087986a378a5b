"""
Pydantic schema definitions for API payloads.

Schemas are separated from the stored representation so that the
API can validate input without constraining the opaque extra fields
kept on each stored record.
"""
