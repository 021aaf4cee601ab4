"""Article Service — article lifecycle orchestration over a relational store,
an object store and an identity service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
