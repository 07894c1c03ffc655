"""Services Layer — operations over the collection store, shaped for the API.

Invariants:
    - Services receive the store by reference; no module-level state
"""
