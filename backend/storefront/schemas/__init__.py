"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (admin forms, storefront checkout)
    - Persisted documents stay free-form dicts; schemas only guard required fields
"""
