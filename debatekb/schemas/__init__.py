"""Pydantic Schemas — request/response validation and the snapshot wire format.

Invariants:
    - Schemas validate at system boundary (API input, snapshot items)
    - Domain enums from core/ used for enum fields, legacy labels accepted

Design Decisions:
    - Separate from models: schemas are API/wire contracts, models are persistence
"""
