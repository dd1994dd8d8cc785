"""Core Layer — pure hierarchy logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic for a given snapshot

Design Decisions:
    - Functional core separated from imperative shell: the shell loads a snapshot,
      the core decides, the shell writes (ADR: impureim sandwich)
"""
