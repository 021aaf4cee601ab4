"""Core Layer — domain types, errors, protocols and pure helpers.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Helpers are pure; the only async code is Protocol signatures

Design Decisions:
    - Functional core separated from imperative shell
"""
