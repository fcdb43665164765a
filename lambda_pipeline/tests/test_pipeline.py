import asyncio
import json
import logging

import pytest

from lambda_pipeline import api, bad_request, passthrough
from lambda_pipeline.core import request_context
from lambda_pipeline.core.exceptions import CallbackAlreadyInvokedError
from lambda_pipeline.services.pipeline import build_handler_factory
from lambda_pipeline.services.preprocessors import preprocessor_passthrough


@pytest.mark.asyncio
async def test_passthrough_sync_result(callback, lambda_context):
    handler = passthrough(lambda call: "foobar")

    await handler({}, lambda_context, callback)

    assert callback.calls == [(None, "foobar")]


@pytest.mark.asyncio
async def test_passthrough_async_result(callback, lambda_context):
    async def logic(call):
        await asyncio.sleep(0)
        return {"echo": call.event["value"]}

    await passthrough(logic)({"value": 3}, lambda_context, callback)

    assert callback.calls == [(None, {"echo": 3})]


@pytest.mark.asyncio
async def test_passthrough_sync_raise_goes_to_error(callback, lambda_context):
    def logic(call):
        raise Exception("fail")

    await passthrough(logic)({}, lambda_context, callback)

    error, result = callback.calls[0]
    assert len(callback.calls) == 1
    assert str(error) == "fail"
    assert result is None


@pytest.mark.asyncio
async def test_passthrough_async_raise_goes_to_error(callback, lambda_context):
    async def logic(call):
        await asyncio.sleep(0)
        raise ValueError("also fail")

    await passthrough(logic)({}, lambda_context, callback)

    assert isinstance(callback.error, ValueError)


@pytest.mark.asyncio
async def test_warmup_skips_logic(callback, lambda_context):
    called = []

    handler = api(lambda call: called.append(call))
    await handler({"warmupOnly": True, "body": "not json"}, lambda_context, callback)

    assert callback.calls == [(None, None)]
    assert called == []


@pytest.mark.asyncio
async def test_warmup_requires_true_not_truthy(callback, lambda_context):
    await passthrough(lambda call: "ran")({"warmupOnly": "yes"}, lambda_context, callback)

    assert callback.result == "ran"


@pytest.mark.asyncio
async def test_preprocess_failure_uses_error_path(callback, lambda_context):
    called = []

    def preprocessor(call):
        raise bad_request("nope")

    def error_handler(call):
        call.callback(call.error, None)

    factory = build_handler_factory(preprocessor, lambda call: None, error_handler)
    await factory(lambda call: called.append(call))({}, lambda_context, callback)

    assert called == []
    assert callback.error.status_code == 400


@pytest.mark.asyncio
async def test_async_preprocessor_is_awaited(callback, lambda_context):
    async def preprocessor(call):
        return call.with_body("decoded")

    def data_handler(call):
        call.callback(None, call.data)

    factory = build_handler_factory(preprocessor, data_handler, lambda call: None)
    await factory(lambda call: call.event["body"])({"body": "raw"}, lambda_context, callback)

    assert callback.result == "decoded"


@pytest.mark.asyncio
async def test_event_is_not_mutated(callback, lambda_context):
    event = {"body": '{"a": 1}'}

    await api(lambda call: call.event["body"])(event, lambda_context, callback)

    assert event == {"body": '{"a": 1}'}
    assert json.loads(callback.result["body"]) == {"a": 1}


@pytest.mark.asyncio
async def test_data_handler_failure_before_callback_goes_to_error(callback, lambda_context):
    def data_handler(call):
        raise RuntimeError("shaping failed")

    def error_handler(call):
        call.callback(call.error, None)

    factory = build_handler_factory(preprocessor_passthrough, data_handler, error_handler)
    await factory(lambda call: "value")({}, lambda_context, callback)

    assert str(callback.error) == "shaping failed"


@pytest.mark.asyncio
async def test_callback_failure_is_not_reported_twice(lambda_context):
    calls = []

    def failing_callback(error, result):
        calls.append((error, result))
        raise RuntimeError("host exploded")

    with pytest.raises(RuntimeError, match="host exploded"):
        await passthrough(lambda call: "ok")({}, lambda_context, failing_callback)

    assert calls == [(None, "ok")]


@pytest.mark.asyncio
async def test_completion_is_single_fire(callback, lambda_context):
    def data_handler(call):
        call.callback(None, 1)
        call.callback(None, 2)

    factory = build_handler_factory(preprocessor_passthrough, data_handler, lambda call: None)
    with pytest.raises(CallbackAlreadyInvokedError):
        await factory(lambda call: None)({}, lambda_context, callback)

    assert callback.calls == [(None, 1)]


@pytest.mark.asyncio
async def test_request_context_bound_during_logic(callback, lambda_context):
    seen = {}

    def logic(call):
        seen["request_id"] = request_context.get_request_id()
        seen["function_name"] = request_context.get_function_name()

    await passthrough(logic)({}, lambda_context, callback)

    assert seen == {"request_id": "req-123", "function_name": "test-func"}
    assert request_context.get_request_id() is None


@pytest.mark.asyncio
async def test_error_handler_failure_still_completes_call(callback, lambda_context, caplog):
    def logic(call):
        raise ValueError("logic failed")

    def error_handler(call):
        raise RuntimeError("error handler broke")

    factory = build_handler_factory(
        preprocessor_passthrough, lambda call: call.callback(None, call.data), error_handler
    )
    with caplog.at_level(logging.ERROR, logger="lambda_pipeline.pipeline"):
        await factory(logic)({}, lambda_context, callback)

    assert isinstance(callback.error, RuntimeError)
    assert str(callback.error) == "error handler broke"
    assert "Error handler failed" in caplog.text


@pytest.mark.asyncio
async def test_error_handler_failure_after_completion_propagates(callback, lambda_context):
    def error_handler(call):
        call.callback(call.error, None)
        raise RuntimeError("late failure")

    def logic(call):
        raise ValueError("logic failed")

    factory = build_handler_factory(
        preprocessor_passthrough, lambda call: call.callback(None, call.data), error_handler
    )
    with pytest.raises(RuntimeError, match="late failure"):
        await factory(logic)({}, lambda_context, callback)

    assert str(callback.error) == "logic failed"
