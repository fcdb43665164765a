"""
Data and error handlers.

Terminal stages of the call pipeline. Each one completes the call by
invoking its callback exactly once.
"""

import json
import logging
from typing import Any, Callable

from lambda_pipeline.core.exceptions import bad_implementation, is_http_error
from lambda_pipeline.models.api import ApiOptions, ApiResponse
from lambda_pipeline.models.call import LambdaCallWithData, LambdaCallWithError

logger = logging.getLogger("lambda_pipeline.handlers")

DataHandler = Callable[[LambdaCallWithData], None]
ErrorHandler = Callable[[LambdaCallWithError], None]

UNEXPECTED_ERROR_MESSAGE = "Unexpected internal server error"


def data_handler_passthrough(call: LambdaCallWithData) -> None:
    call.callback(None, call.data)


def error_handler_passthrough(call: LambdaCallWithError) -> None:
    call.callback(call.error, None)


def shape_response(data: Any, default_headers: dict) -> ApiResponse:
    """
    Turn a logic handler result into an API response.

    A dict with a `statusCode` key is treated as a partial response;
    anything else becomes the body of a 200 response.
    """
    if isinstance(data, dict) and "statusCode" in data:
        status_code = data["statusCode"]
        if not isinstance(status_code, int) or isinstance(status_code, bool):
            raise bad_implementation("Data handler returned invalid status code")
        body = data.get("body", "")
        headers = data.get("headers")
        if headers is None:
            headers = default_headers
    else:
        status_code = 200
        body = data
        headers = default_headers

    if not isinstance(body, str):
        body = json.dumps(body)

    return ApiResponse(statusCode=status_code, body=body, headers=headers)


def data_handler_api_with_options(options: ApiOptions) -> DataHandler:
    data_headers = options.resolve_data_headers()

    def data_handler(call: LambdaCallWithData) -> None:
        response = shape_response(call.data, data_headers)
        call.callback(None, response.to_dict())

    return data_handler


def normalize_error(error: Any):
    """Return an error carrying status_code and payload for any raised value."""
    if is_http_error(error):
        return error
    message = getattr(error, "message", None) or str(error) or UNEXPECTED_ERROR_MESSAGE
    return bad_implementation(message)


def error_handler_api_with_options(options: ApiOptions) -> ErrorHandler:
    error_headers = options.resolve_error_headers()

    def error_handler(call: LambdaCallWithError) -> None:
        if options.error_pre_handler is not None:
            try:
                options.error_pre_handler(call.error)
            except Exception:
                logger.exception("errorPreHandler raised; ignoring")

        http_error = normalize_error(call.error)
        if http_error.status_code >= 500:
            logger.error(
                f"Request failed: {call.error}",
                exc_info=call.error if isinstance(call.error, BaseException) else None,
                extra={"status_code": http_error.status_code},
            )
        else:
            logger.warning(
                f"Request rejected: {call.error}",
                extra={"status_code": http_error.status_code},
            )

        status_code = http_error.status_code
        try:
            body = json.dumps(http_error.payload)
        except (TypeError, ValueError):
            logger.exception(f"Error payload for status {status_code} is not JSON serializable")
            fallback = bad_implementation(UNEXPECTED_ERROR_MESSAGE)
            status_code = fallback.status_code
            body = json.dumps(fallback.payload)

        response = ApiResponse(statusCode=status_code, body=body, headers=error_headers)
        call.callback(None, response.to_dict())

    return error_handler
