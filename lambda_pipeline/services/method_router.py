"""
Method Router

Dispatches an API request to one of several logic handlers by HTTP method.
"""

import logging
from typing import Any, Dict

from lambda_pipeline.core.exceptions import bad_request
from lambda_pipeline.models.call import LambdaCall
from lambda_pipeline.services.pipeline import LogicHandler

logger = logging.getLogger("lambda_pipeline.method_router")

MethodMapping = Dict[str, LogicHandler]


class MethodRouter:
    """
    Logic handler that delegates to the handler registered for `event.httpMethod`.

    Method names are matched case-insensitively.
    """

    def __init__(self, mapping: MethodMapping):
        self.mapping = {method.lower(): handler for method, handler in mapping.items()}

    def resolve(self, http_method: Any) -> LogicHandler:
        if not http_method:
            raise bad_request("Request event did not contain httpMethod")
        handler = self.mapping.get(str(http_method).lower())
        if handler is None:
            raise bad_request(f"This resource does not support the '{http_method}' method")
        return handler

    def __call__(self, call: LambdaCall) -> Any:
        http_method = call.event.get("httpMethod")
        handler = self.resolve(http_method)
        logger.debug(f"Dispatching {http_method} request")
        # Returned as-is; the pipeline awaits it when it is a coroutine.
        return handler(call)
