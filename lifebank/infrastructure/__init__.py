"""Infrastructure Layer — persistence, clock, event sink, and logging adapters.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every adapter satisfies a Protocol from core/repository_protocols.py

Design Decisions:
    - Thin adapters over SQLAlchemy and stdlib logging: the core never sees a session
"""
