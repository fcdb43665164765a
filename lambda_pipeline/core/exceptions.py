"""
Custom exception classes.

Two families live here:
- HttpError and its subclasses: errors that already know the HTTP response
  they should turn into (status code + JSON payload).
- LambdaInvokeError and its subclasses: failures of a cross-function call.
"""

import json
from http import HTTPStatus
from typing import Any, Dict, List, Optional

GENERIC_SERVER_ERROR_MESSAGE = "An internal server error occurred"


class HttpError(Exception):
    """
    Error carrying its own intended status code and response payload.

    Payload shape: {"statusCode": int, "error": str, "message": str, **extra}.
    Server errors (5xx) never expose their message in the payload; the
    original message is kept on the exception for logging.
    """

    default_status_code = 500

    def __init__(self, message: str = "", status_code: Optional[int] = None, **extra: Any):
        self.status_code = status_code or self.default_status_code
        self.message = message
        self.extra = extra
        super().__init__(message)

    @property
    def is_server(self) -> bool:
        return self.status_code >= 500

    @property
    def payload(self) -> Dict[str, Any]:
        try:
            reason = HTTPStatus(self.status_code).phrase
        except ValueError:
            reason = "Unknown"
        message = GENERIC_SERVER_ERROR_MESSAGE if self.is_server else (self.message or reason)
        payload: Dict[str, Any] = {
            "statusCode": self.status_code,
            "error": reason,
            "message": message,
        }
        payload.update(self.extra)
        return payload


class ValidationError(HttpError):
    """Client-caused error (400)."""

    default_status_code = 400


class ImplementationError(HttpError):
    """Server-caused error (500)."""

    default_status_code = 500


def bad_request(message: str = "", **extra: Any) -> ValidationError:
    return ValidationError(message, **extra)


def bad_implementation(message: str = "", **extra: Any) -> ImplementationError:
    return ImplementationError(message, **extra)


def is_http_error(error: Any) -> bool:
    """Capability check: does the value carry a usable status code and payload?"""
    if isinstance(error, HttpError):
        return True
    status_code = getattr(error, "status_code", None)
    payload = getattr(error, "payload", None)
    return (
        isinstance(status_code, int)
        and not isinstance(status_code, bool)
        and isinstance(payload, dict)
    )


# ===========================================
# Pipeline contract errors
# ===========================================


class PipelineError(Exception):
    """Base exception class for call pipeline contract violations."""

    pass


class CallbackAlreadyInvokedError(PipelineError):
    """Raised when a completion callback is invoked a second time."""

    def __init__(self):
        super().__init__("Completion callback was already invoked")


class CallbackError(PipelineError):
    """
    Raised by the runtime entrypoint when the callback received a non-exception
    error value. The message is the JSON form of that value when possible.
    """

    def __init__(self, error: Any):
        self.error = error
        if isinstance(error, str):
            message = error
        else:
            try:
                message = json.dumps(error)
            except (TypeError, ValueError):
                message = str(error)
        super().__init__(message)


# ===========================================
# Invocation errors
# ===========================================


class LambdaInvokeError(Exception):
    """Base exception class for Lambda invocation."""

    pass


class InvocationTransportError(LambdaInvokeError):
    """Raised when the Lambda service itself fails or returns something unusable."""

    def __init__(self, function_name: str, detail: str):
        self.function_name = function_name
        self.detail = detail
        super().__init__(detail)


class UnhandledFunctionError(LambdaInvokeError):
    """
    Raised when the remote function terminated with an uncaught exception.

    The payload is the error object generated by the Lambda service, e.g.
    {"errorMessage": ..., "errorType": ..., "stackTrace": [...]}.
    """

    def __init__(self, function_name: str, payload: Any):
        self.function_name = function_name
        self.payload = payload
        super().__init__(f"Lambda {function_name} failed: {self.error_message}")

    def _field(self, key: str) -> Any:
        if isinstance(self.payload, dict):
            return self.payload.get(key)
        return None

    @property
    def error_message(self) -> Optional[str]:
        return self._field("errorMessage")

    @property
    def error_type(self) -> Optional[str]:
        return self._field("errorType")

    @property
    def stack_trace(self) -> List[str]:
        return self._field("stackTrace") or []


class HandledFunctionError(LambdaInvokeError):
    """
    Raised when the remote function completed but reported an error through
    its own error channel. `error` is the decoded JSON value when the
    message was JSON, otherwise the raw message string.
    """

    def __init__(self, function_name: str, error: Any):
        self.function_name = function_name
        self.error = error
        super().__init__(f"Lambda {function_name} returned error: {error}")


class UnrecognizedFunctionError(LambdaInvokeError):
    """Raised for a FunctionError value other than Handled/Unhandled."""

    def __init__(self, function_name: str, function_error: str):
        self.function_name = function_name
        self.function_error = function_error
        super().__init__(f"Unrecognized Lambda response FunctionError value '{function_error}'")
