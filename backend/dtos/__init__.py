"""
Data Transfer Objects (DTOs)

Shapes exchanged with API clients and passed between the API layer and the
product handlers. ORM models never leave the repository/handler layer.

- request/: bodies accepted by the product endpoints
- response/: product view and the success/failure envelope
- internal/: commands and queries consumed by the handlers
"""
