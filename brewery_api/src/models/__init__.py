"""Data models for the FastAPI service.

This package contains the SQLAlchemy schema declarations, the immutable
entities repositories work with, and the Pydantic transfer objects used for
request/response validation.
"""
