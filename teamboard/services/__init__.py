"""Services Layer — imperative shell: load snapshot, call core, write, commit.

Invariants:
    - Services own transactions; routes never commit
    - Hierarchy rules are never re-implemented here (always delegated to core/)
"""
