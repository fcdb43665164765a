"""
Data model definitions package.
"""

from .api import ApiOptions, ApiResponse, Headers
from .call import (
    Callback,
    CompletionCallback,
    LambdaCall,
    LambdaCallWithData,
    LambdaCallWithError,
    LambdaEvent,
)

__all__ = [
    "ApiOptions",
    "ApiResponse",
    "Headers",
    "Callback",
    "CompletionCallback",
    "LambdaCall",
    "LambdaCallWithData",
    "LambdaCallWithError",
    "LambdaEvent",
]
