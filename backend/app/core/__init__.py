"""Core Layer — pure domain logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, client/, or infrastructure/
    - Query functions are pure and deterministic; the store is plain in-memory state

Design Decisions:
    - Functional core separated from imperative shell
"""
