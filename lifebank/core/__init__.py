"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All validators are pure and deterministic: same inputs, same verdict

Design Decisions:
    - Functional core separated from imperative shell: services load state,
      core decides, services persist
"""
