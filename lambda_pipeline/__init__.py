"""
lambda_pipeline

Request-handling adapter for AWS Lambda functions: decode the trigger
payload, run the logic once, shape the result or error into a response,
and call other functions with their failures reclassified.
"""

from .core.exceptions import (
    CallbackAlreadyInvokedError,
    CallbackError,
    HandledFunctionError,
    HttpError,
    ImplementationError,
    InvocationTransportError,
    LambdaInvokeError,
    UnhandledFunctionError,
    UnrecognizedFunctionError,
    ValidationError,
    bad_implementation,
    bad_request,
    is_http_error,
)
from .core.logging_config import configure_logging_once, setup_logging
from .entrypoint import lambda_entrypoint
from .factories import (
    api,
    api_methods,
    api_methods_with_options,
    api_with_options,
    lambda_warmer,
    passthrough,
    post_form_url_encoded,
    post_raw,
)
from .models import ApiOptions, LambdaCall
from .services.invoker import LambdaInvoker, invoke_event, invoke_request_response
from .services.pipeline import build_handler_factory

__all__ = [
    "build_handler_factory",
    "passthrough",
    "api",
    "api_with_options",
    "api_methods",
    "api_methods_with_options",
    "post_raw",
    "post_form_url_encoded",
    "lambda_warmer",
    "lambda_entrypoint",
    "setup_logging",
    "configure_logging_once",
    "invoke_request_response",
    "invoke_event",
    "LambdaInvoker",
    "ApiOptions",
    "LambdaCall",
    "HttpError",
    "ValidationError",
    "ImplementationError",
    "bad_request",
    "bad_implementation",
    "is_http_error",
    "LambdaInvokeError",
    "InvocationTransportError",
    "UnhandledFunctionError",
    "HandledFunctionError",
    "UnrecognizedFunctionError",
    "CallbackAlreadyInvokedError",
    "CallbackError",
]
