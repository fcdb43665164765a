"""
Services package.

Pipeline stages and the Lambda invocation client.
"""

from .invoker import LambdaInvoker
from .method_router import MethodRouter
from .pipeline import build_handler_factory

__all__ = [
    "LambdaInvoker",
    "MethodRouter",
    "build_handler_factory",
]
