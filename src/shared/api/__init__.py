"""
Shared API
==========

Middleware and exception handlers used by the FastAPI application.
"""
