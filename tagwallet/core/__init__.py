"""
Core utilities shared across the tagwallet backends.

This package hosts configuration, logging, the error taxonomy, password and
token helpers, avatar storage and the per-IP rate limiter. Routers and
services depend on these primitives instead of reading the environment or
touching the filesystem directly.
"""
