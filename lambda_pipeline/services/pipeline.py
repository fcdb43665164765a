"""
Call Pipeline

Composes a preprocessor, a data handler and an error handler around a
logic handler:

    event -> [warmup check] -> preprocess -> logic -> data handler
                                   \\__________\\______-> error handler

Every stage may be synchronous or return an awaitable. Exactly one of the
two terminal handlers completes the call.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from lambda_pipeline.core.request_context import bind_lambda_context, clear_request_context
from lambda_pipeline.models.call import Callback, CompletionCallback, LambdaCall, LambdaEvent
from lambda_pipeline.services.handlers import DataHandler, ErrorHandler
from lambda_pipeline.services.preprocessors import Preprocessor

logger = logging.getLogger("lambda_pipeline.pipeline")

LogicHandler = Callable[[LambdaCall], Union[Any, Awaitable[Any]]]
LambdaHandler = Callable[[LambdaEvent, Any, Callback], Awaitable[None]]
LambdaHandlerFactory = Callable[[LogicHandler], LambdaHandler]


async def resolve(value: Any) -> Any:
    """Await the value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def is_warmup_event(event: Any) -> bool:
    return isinstance(event, dict) and event.get("warmupOnly") is True


def build_handler_factory(
    preprocessor: Preprocessor,
    data_handler: DataHandler,
    error_handler: ErrorHandler,
) -> LambdaHandlerFactory:
    """
    Build a factory turning logic handlers into `(event, context, callback)` handlers.

    Args:
        preprocessor: Decodes the incoming event
        data_handler: Completes the call on success
        error_handler: Completes the call on failure

    Returns:
        Function taking a logic handler and returning an async Lambda handler
    """

    def factory(logic_handler: LogicHandler) -> LambdaHandler:
        async def handler(event: LambdaEvent, context: Any, callback: Callback) -> None:
            if is_warmup_event(event):
                logger.info("Warmup only")
                callback(None, None)
                return

            completion = CompletionCallback(callback)
            call = LambdaCall(event=event, context=context, callback=completion)
            bind_lambda_context(context)
            try:
                try:
                    processed = await resolve(preprocessor(call))
                    data = await resolve(logic_handler(processed))
                    await resolve(data_handler(call.with_data(data)))
                except Exception as error:
                    if completion.invoked:
                        # The callback itself failed; the host must see it.
                        raise
                    try:
                        await resolve(error_handler(call.with_error(error)))
                    except Exception as handler_error:
                        if completion.invoked:
                            raise
                        logger.exception("Error handler failed before completing the call")
                        completion(handler_error, None)
            finally:
                clear_request_context()

        return handler

    return factory
