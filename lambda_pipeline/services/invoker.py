"""
Lambda Invoker Service

Calls another Lambda function through boto3.client('lambda').invoke() and
reclassifies the outcome:

- RequestResponse: wait for the result; service failures, uncaught remote
  exceptions and errors the remote reported itself each raise a distinct
  exception type.
- Event: fire-and-forget; only the service's acceptance is checked.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from lambda_pipeline.core.config import PipelineSettings
from lambda_pipeline.core.exceptions import (
    HandledFunctionError,
    InvocationTransportError,
    UnhandledFunctionError,
    UnrecognizedFunctionError,
)

logger = logging.getLogger("lambda_pipeline.invoker")

INVOCATION_TYPE_REQUEST_RESPONSE = "RequestResponse"
INVOCATION_TYPE_EVENT = "Event"

# Status codes documented for Lambda.Invoke
REQUEST_RESPONSE_SUCCESS_STATUS = 200
EVENT_ACCEPTED_STATUS = 202

FUNCTION_ERROR_UNHANDLED = "Unhandled"
FUNCTION_ERROR_HANDLED = "Handled"


def create_lambda_client(settings: Optional[PipelineSettings] = None):
    """Create a boto3 Lambda client configured from settings."""
    settings = settings or PipelineSettings()
    config = Config(
        connect_timeout=settings.LAMBDA_CONNECT_TIMEOUT,
        read_timeout=settings.LAMBDA_READ_TIMEOUT,
        retries={"total_max_attempts": settings.LAMBDA_MAX_ATTEMPTS, "mode": "standard"},
    )
    return boto3.client(
        "lambda",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.LAMBDA_ENDPOINT_URL,
        config=config,
    )


def _read_payload(response: dict) -> Any:
    payload = response.get("Payload")
    if payload is None:
        return b""
    if hasattr(payload, "read"):
        return payload.read()
    return payload


def _describe_response(response: dict) -> str:
    return json.dumps(response, indent=2, default=str)


class LambdaInvoker:
    def __init__(self, client=None, settings: Optional[PipelineSettings] = None):
        """
        Args:
            client: boto3 Lambda client; built from settings when omitted
            settings: PipelineSettings used to build the client
        """
        self.client = client if client is not None else create_lambda_client(settings)

    async def _invoke(self, function_name: str, event: Any, invocation_type: str) -> dict:
        params = {
            "FunctionName": function_name,
            "Payload": json.dumps(event),
            "InvocationType": invocation_type,
        }
        logger.info(f"Invoking {function_name} ({invocation_type})")
        try:
            return await asyncio.to_thread(self.client.invoke, **params)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                f"Lambda invocation failed for function '{function_name}'",
                extra={
                    "target_function": function_name,
                    "invocation_type": invocation_type,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise InvocationTransportError(
                function_name, f"Failed to invoke Lambda function {function_name}: {e}"
            ) from e

    async def invoke_request_response(self, function_name: str, event: Any) -> Any:
        """
        Invoke a function synchronously and return its decoded result.

        Raises:
            InvocationTransportError: Lambda service failure or malformed payload
            UnhandledFunctionError: the remote function crashed
            HandledFunctionError: the remote function returned an error
            UnrecognizedFunctionError: unknown FunctionError value
        """
        response = await self._invoke(function_name, event, INVOCATION_TYPE_REQUEST_RESPONSE)

        if response.get("StatusCode") != REQUEST_RESPONSE_SUCCESS_STATUS:
            # Lambda service failure
            raise InvocationTransportError(
                function_name,
                f"Failed to invoke Lambda function {function_name}:\n{_describe_response(response)}",
            )

        raw_payload = _read_payload(response)
        try:
            payload = json.loads(raw_payload)
        except (TypeError, ValueError) as e:
            # Bad JSON payload from Lambda service?
            raise InvocationTransportError(
                function_name,
                f"Failed to parse Lambda response payload '{raw_payload!r}':\n{e}",
            ) from e

        function_error = response.get("FunctionError")
        if function_error:
            if function_error == FUNCTION_ERROR_UNHANDLED:
                # Error object generated by the Lambda service:
                # {"errorMessage": ..., "errorType": ..., "stackTrace": [...]}
                logger.warning(f"Lambda {function_name} raised an unhandled error")
                raise UnhandledFunctionError(function_name, payload)

            if function_error == FUNCTION_ERROR_HANDLED:
                # The service coerces the error to a string; JSON strings
                # carry structured errors through.
                error_message = payload.get("errorMessage") if isinstance(payload, dict) else payload
                try:
                    error = json.loads(error_message)
                except (TypeError, ValueError):
                    error = error_message
                logger.warning(f"Lambda {function_name} returned a handled error")
                raise HandledFunctionError(function_name, error)

            raise UnrecognizedFunctionError(function_name, function_error)

        return payload

    async def invoke_event(self, function_name: str, event: Any) -> bool:
        """
        Dispatch an asynchronous invocation. Returns True once the service accepts it.

        Raises:
            InvocationTransportError: the service did not accept the event
        """
        response = await self._invoke(function_name, event, INVOCATION_TYPE_EVENT)

        if response.get("StatusCode") != EVENT_ACCEPTED_STATUS:
            raise InvocationTransportError(
                function_name,
                f"Failed to invoke Lambda function {function_name}:\n{_describe_response(response)}",
            )

        return True


_default_invoker: Optional[LambdaInvoker] = None


def get_default_invoker() -> LambdaInvoker:
    global _default_invoker
    if _default_invoker is None:
        _default_invoker = LambdaInvoker()
    return _default_invoker


async def invoke_request_response(function_name: str, event: Any) -> Any:
    return await get_default_invoker().invoke_request_response(function_name, event)


async def invoke_event(function_name: str, event: Any) -> bool:
    return await get_default_invoker().invoke_event(function_name, event)
