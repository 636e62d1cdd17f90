"""Application middleware."""
from globalpoll.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
