"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate SHAPE at the system boundary (types, enums, non-empty identities)
    - Ledger RULES (quantity ranges, shelf life, urgency windows) are NOT duplicated here:
      out-of-range values pass through to core/ and fail with the ledger's own error codes

Design Decisions:
    - Separate from core entities: schemas are API contracts, entities are ledger records
"""
