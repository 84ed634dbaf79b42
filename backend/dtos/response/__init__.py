"""
Response DTOs

Product view returned by lookups and the ApiResponse envelope returned by
writes and validation failures.
"""
