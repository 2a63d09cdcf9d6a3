"""Business logic services.

This package contains service classes that orchestrate repository calls
and entity/DTO mapping for the beer and customer resources, plus the
bearer token service used by the auth middleware.
"""
