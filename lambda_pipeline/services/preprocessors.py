"""
Event preprocessors.

A preprocessor takes a LambdaCall and returns a LambdaCall whose event body
has been decoded. Failures are raised as HttpError subclasses so they flow
through the same error path as logic handler failures.
"""

import base64
import json
import logging
import re
from typing import Awaitable, Callable, Dict, Union
from urllib.parse import unquote

from lambda_pipeline.core.exceptions import bad_implementation, bad_request
from lambda_pipeline.models.call import LambdaCall, LambdaEvent

logger = logging.getLogger("lambda_pipeline.preprocessors")

Preprocessor = Callable[[LambdaCall], Union[LambdaCall, Awaitable[LambdaCall]]]

# '%' not followed by two hex digits
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def preprocessor_passthrough(call: LambdaCall) -> LambdaCall:
    return call


def preprocessor_body_json(call: LambdaCall) -> LambdaCall:
    """Parse a JSON string body. Empty or missing bodies are left untouched."""
    body = call.event.get("body")
    if not body:
        return call
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to parse event.body JSON: '{body}'")
        raise bad_implementation("Invalid body JSON") from e
    return call.with_body(parsed)


def decode_event_body64(event: LambdaEvent) -> str:
    """
    Decode `body64` into text.

    Raises:
        ValidationError: body64 missing, body also present, or undecodable
    """
    body64 = event.get("body64")
    if not body64:
        raise bad_request("No base64-encoded body found")

    if event.get("body"):
        raise bad_request("Event already contains body in addition to body64")

    try:
        return base64.b64decode(body64, validate=True).decode("utf-8")
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to decode event.body64: '{body64}'")
        raise bad_request("Failed to decode base64-encoded body") from e


def _decode_form_component(component: str) -> str:
    component = component.replace("+", " ")
    if _MALFORMED_ESCAPE.search(component):
        raise ValueError(f"Malformed percent escape in '{component}'")
    return unquote(component, errors="strict")


def parse_form_url_encoded(text: str) -> Dict[str, str]:
    """
    Parse an application/x-www-form-urlencoded string.

    Every `&`-separated segment must be exactly one `key=value` pair; any
    malformed pair fails the whole parse.
    """
    body: Dict[str, str] = {}
    for pair in text.split("&"):
        try:
            split_pair = pair.split("=")
            if len(split_pair) != 2:
                raise ValueError(f"Invalid pair length {len(split_pair)}")
            key = _decode_form_component(split_pair[0])
            value = _decode_form_component(split_pair[1])
        except ValueError as e:
            logger.error(f"Failed to parse form-url-encoded body '{text}' on pair '{pair}'")
            raise bad_request("Failed to parse form-url-encoded body") from e
        body[key] = value
    return body


def preprocessor_body64(call: LambdaCall) -> LambdaCall:
    return call.with_body(decode_event_body64(call.event))


def preprocessor_body64_form_url_encoded(call: LambdaCall) -> LambdaCall:
    decoded_body = decode_event_body64(call.event)
    return call.with_body(parse_form_url_encoded(decoded_body))
