"""
Internal DTOs

Immutable commands and queries handed from the API layer to the product
handlers. Not exposed to clients.
"""
