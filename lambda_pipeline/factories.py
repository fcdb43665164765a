"""
Composed handler factories.

Each factory takes a logic handler and returns an async
`(event, context, callback)` Lambda handler:

- passthrough: no decoding, raw result/error to the callback
- api / api_with_options: JSON body, API Gateway response envelope
- api_methods / api_methods_with_options: api + dispatch by HTTP method
- post_raw: base64 body decoded to text, passthrough result/error
- post_form_url_encoded: base64 form body decoded to a dict, passthrough result/error
"""

from typing import Iterable, Optional

from lambda_pipeline.models.api import ApiOptions
from lambda_pipeline.services.handlers import (
    data_handler_api_with_options,
    data_handler_passthrough,
    error_handler_api_with_options,
    error_handler_passthrough,
)
from lambda_pipeline.services.invoker import LambdaInvoker
from lambda_pipeline.services.method_router import MethodMapping, MethodRouter
from lambda_pipeline.services.pipeline import (
    LambdaHandler,
    LambdaHandlerFactory,
    build_handler_factory,
)
from lambda_pipeline.services.preprocessors import (
    preprocessor_body64,
    preprocessor_body64_form_url_encoded,
    preprocessor_body_json,
    preprocessor_passthrough,
)
from lambda_pipeline.services.warmer import warmer_logic_handler

passthrough = build_handler_factory(
    preprocessor_passthrough,
    data_handler_passthrough,
    error_handler_passthrough,
)


def api_with_options(options: Optional[ApiOptions] = None) -> LambdaHandlerFactory:
    options = options or ApiOptions()
    return build_handler_factory(
        preprocessor_body_json,
        data_handler_api_with_options(options),
        error_handler_api_with_options(options),
    )


api = api_with_options(ApiOptions())


def api_methods_with_options(options: Optional[ApiOptions] = None):
    factory = api_with_options(options)

    def api_methods_factory(mapping: MethodMapping) -> LambdaHandler:
        return factory(MethodRouter(mapping))

    return api_methods_factory


api_methods = api_methods_with_options(ApiOptions())

post_raw = build_handler_factory(
    preprocessor_body64,
    data_handler_passthrough,
    error_handler_passthrough,
)

post_form_url_encoded = build_handler_factory(
    preprocessor_body64_form_url_encoded,
    data_handler_passthrough,
    error_handler_passthrough,
)


def lambda_warmer(
    function_names: Iterable[str], invoker: Optional[LambdaInvoker] = None
) -> LambdaHandler:
    """Passthrough handler that sends a warm-up event to every named function."""
    return passthrough(warmer_logic_handler(function_names, invoker))
