"""Infrastructure Layer — database sessions, transaction discipline, logging.

Invariants:
    - Infrastructure never contains hierarchy rules (those live in core/)

Design Decisions:
    - Imperative shell around the functional core
"""
