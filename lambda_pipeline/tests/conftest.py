import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from lambda_pipeline.core import logging_config
from lambda_pipeline.core.request_context import clear_request_context


class CallbackRecorder:
    """Error-first callback that records every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, error=None, result=None):
        self.calls.append((error, result))

    @property
    def error(self):
        assert len(self.calls) == 1, f"expected exactly one callback, got {self.calls}"
        return self.calls[0][0]

    @property
    def result(self):
        assert len(self.calls) == 1, f"expected exactly one callback, got {self.calls}"
        return self.calls[0][1]


@pytest.fixture
def callback():
    return CallbackRecorder()


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        function_name="test-func",
        aws_request_id="req-123",
        invoked_function_arn="arn:aws:lambda:us-east-1:123456789012:function:test-func",
    )


@pytest.fixture(autouse=True)
def _clear_context():
    clear_request_context()
    yield
    clear_request_context()


def make_invoke_response(status_code=200, payload=b"", function_error=None):
    """Shape of boto3 Lambda.invoke() responses; Payload is file-like."""
    response = {
        "StatusCode": status_code,
        "Payload": io.BytesIO(payload),
        "ResponseMetadata": {"HTTPStatusCode": status_code},
    }
    if function_error is not None:
        response["FunctionError"] = function_error
    return response


@pytest.fixture
def lambda_client():
    return MagicMock()


@pytest.fixture
def invoke_response():
    return make_invoke_response


@pytest.fixture(autouse=True)
def _logging_already_configured(monkeypatch):
    # Keep the packaged logging.yml out of tests; it disables propagation for caplog.
    monkeypatch.setattr(logging_config, "_logging_configured", True)
