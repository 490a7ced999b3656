"""
Persistence adapters.

Each backend mirrors the whole complaint list (SQL table, JSON snapshot).
Services depend on the ComplaintBackend interface rather than on a given store.
"""
