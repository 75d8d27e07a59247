"""
API package: routes, dependencies and exception handlers.
"""
