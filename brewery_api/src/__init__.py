"""FastAPI service for the brewery inventory.

This package provides REST API endpoints for managing beers and customers
stored in PostgreSQL.
"""

__version__ = "2.0.0"
