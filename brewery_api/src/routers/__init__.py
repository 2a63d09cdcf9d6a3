"""HTTP routers, one per resource, mounted under ``Settings.api_prefix``."""
