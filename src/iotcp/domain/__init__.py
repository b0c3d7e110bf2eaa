"""Domain layer — record types, caller roles, and the redaction policy.

Pure Python with pydantic models; no I/O. Infrastructure and services
depend on this package, never the reverse.
"""
