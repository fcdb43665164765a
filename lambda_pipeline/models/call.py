"""
Call context models.

A LambdaCall bundles the three values the host hands to a handler
(event, context, callback). Stages never mutate a call; they derive new ones.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from lambda_pipeline.core.exceptions import CallbackAlreadyInvokedError

LambdaEvent = Dict[str, Any]
Callback = Callable[[Any, Any], None]


class CompletionCallback:
    """
    Error-first completion callback that may fire only once.

    A second call raises CallbackAlreadyInvokedError instead of reaching
    the wrapped callback.
    """

    def __init__(self, callback: Callback):
        self._callback = callback
        self.invoked = False

    def __call__(self, error: Any = None, result: Any = None) -> None:
        if self.invoked:
            raise CallbackAlreadyInvokedError()
        self.invoked = True
        self._callback(error, result)


@dataclass(frozen=True)
class LambdaCall:
    event: LambdaEvent
    context: Any
    callback: Callback

    def with_event(self, event: LambdaEvent) -> "LambdaCall":
        return replace(self, event=event)

    def with_body(self, body: Any) -> "LambdaCall":
        return self.with_event({**self.event, "body": body})

    def with_data(self, data: Any) -> "LambdaCallWithData":
        return LambdaCallWithData(self.event, self.context, self.callback, data)

    def with_error(self, error: Any) -> "LambdaCallWithError":
        return LambdaCallWithError(self.event, self.context, self.callback, error)


@dataclass(frozen=True)
class LambdaCallWithData(LambdaCall):
    data: Optional[Any] = None


@dataclass(frozen=True)
class LambdaCallWithError(LambdaCall):
    error: Optional[Any] = None
