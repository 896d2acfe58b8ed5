"""
Core utilities shared across the home service.

This package hosts configuration helpers (env vars, feature flags) and the
logging setup. Routers, services and repositories depend on these primitives
instead of reading os.environ directly.
"""
