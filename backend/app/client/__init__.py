"""Client Layer — list view controller and its HTTP transport.

Invariants:
    - client/ talks to the server only through ListTransport
    - Local edits (selection, reorder) never reach the server before save()
"""
