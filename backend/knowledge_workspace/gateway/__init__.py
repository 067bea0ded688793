"""
API Gateway Module

Centralized gateway layer for the API that handles middleware, error
handling, router registration and health endpoints.
"""
from .gateway import API_PREFIX, APIGateway

__all__ = ["API_PREFIX", "APIGateway"]
