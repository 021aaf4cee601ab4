"""Infrastructure Layer — database manager, object store, identity client, logging.

Invariants:
    - Every external failure is mapped to a core/errors.py type at this layer
    - No retries here: callers decide whether to retry

Design Decisions:
    - Thin adapters over raw clients, constructed once at startup
"""
