"""
Use cases for the complaint logger.

The console calls the ComplaintStore; the store pushes every change through
the PersistenceGateway to the SQL table and the JSON snapshot.
"""
