"""ORM Models — SQLAlchemy tables backing the key/value substrate.

Invariants:
    - Models hold storage shape only; ledger rules live in core/
"""
