"""
Configuration package.

Environment-driven settings for the product catalog service.
"""
