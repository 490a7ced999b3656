"""
Cross-cutting helpers for the complaints package.

- configuration (env vars, storage paths)
- logging setup shared by the console and the storage layers
"""
