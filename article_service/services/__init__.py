"""Services Layer — relational store, attachment index, orchestrator, cleanup queue.

Invariants:
    - Services receive every collaborator through their constructor
    - SQL lives here; the orchestrator only talks to core Protocols
"""
