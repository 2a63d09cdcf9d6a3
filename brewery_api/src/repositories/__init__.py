"""Data access layer.

Each repository wraps an asyncpg pool and exposes the same capability set:
``find_by_id``, ``find_all``, ``save``, ``delete_by_id`` and ``count``.
"""
