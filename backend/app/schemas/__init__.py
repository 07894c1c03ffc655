"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - The list client parses server responses with the same models

Design Decisions:
    - Separate from core: schemas are API contracts, core types are domain state
"""
