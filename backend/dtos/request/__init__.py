"""
Request DTOs

Bodies accepted by the product endpoints. Pydantic enforces types here;
value rules are checked by the handlers.
"""
