"""
Core package.

Shared configuration, logging, request context and exceptions.
"""

from .config import PipelineSettings
from .exceptions import (
    HttpError,
    ImplementationError,
    ValidationError,
    bad_implementation,
    bad_request,
    is_http_error,
)

__all__ = [
    "PipelineSettings",
    "HttpError",
    "ImplementationError",
    "ValidationError",
    "bad_implementation",
    "bad_request",
    "is_http_error",
]
