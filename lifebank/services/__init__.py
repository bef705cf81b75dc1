"""Services Layer — use cases that compose allocator, validators, store, and indexes.

Invariants:
    - Every mutating use case runs inside ledger_operation (all-or-nothing)
    - Events are published only after the operation commits

Design Decisions:
    - One component per file (allocator, record store, index maintainer, access control),
      composed by the two domain services: UnitRegistry and RequestLedger
"""
