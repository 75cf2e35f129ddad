"""
API Gateway Module

Builds the FastAPI application with middleware, exception handlers and
health endpoints. The gateway is the single entry point for API requests.
"""
from .gateway import APIGateway

__all__ = ["APIGateway"]
