"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or models/
    - All functions are pure and deterministic (the lookup cache is the one
      stateful object, and its owner decides its lifetime)

Design Decisions:
    - Functional core separated from imperative shell: normalization, fingerprints,
      similarity and merge classification are testable with plain data in/data out
"""
