"""
Runtime entrypoint adapter.

The AWS Lambda Python runtime calls `handler(event, context)` and expects a
return value or a raised exception. `lambda_entrypoint` runs a callback-style
pipeline handler to completion and converts its single completion into that
shape.

Usage:
    from lambda_pipeline import api, lambda_entrypoint

    lambda_handler = lambda_entrypoint(api(lambda call: {"hello": "world"}))

Wrapping a handler at import time also runs setup_logging() once, which is
the cold-start initialization point of the function.
"""

import asyncio
import functools
import logging
from typing import Any

from lambda_pipeline.core.exceptions import CallbackError
from lambda_pipeline.core import logging_config
from lambda_pipeline.services.pipeline import LambdaHandler

logger = logging.getLogger("lambda_pipeline.entrypoint")


class _Completion:
    """Records the (error, result) pair passed to the callback."""

    def __init__(self):
        self.done = False
        self.error: Any = None
        self.result: Any = None

    def __call__(self, error: Any = None, result: Any = None) -> None:
        self.done = True
        self.error = error
        self.result = result


def lambda_entrypoint(handler: LambdaHandler, configure_logging: bool = True):
    """
    Wrap an async `(event, context, callback)` handler as `(event, context) -> result`.

    Logging is configured once per process (LOGGING_CONFIG_PATH / LOG_LEVEL)
    when the first handler is wrapped, unless configure_logging is False.

    Raises:
        Exception: the error passed to the callback, when it is an exception
        CallbackError: for non-exception error values, or when the handler
            never invoked its callback
    """
    if configure_logging:
        logging_config.configure_logging_once()

    @functools.wraps(handler)
    def wrapper(event, context):
        completion = _Completion()
        try:
            asyncio.run(handler(event, context, completion))
        finally:
            logging_config.flush_handlers()

        if not completion.done:
            raise CallbackError("Handler finished without invoking callback")
        if completion.error is not None:
            if isinstance(completion.error, Exception):
                raise completion.error
            raise CallbackError(completion.error)
        return completion.result

    return wrapper
