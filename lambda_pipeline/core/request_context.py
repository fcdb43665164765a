"""
RequestContext management.
Use ContextVar to share the invocation's request id across async execution.
"""

from contextvars import ContextVar
from typing import Any, Optional


# Context variable for the AWS request id of the current invocation.
_request_id_var: ContextVar[Optional[str]] = ContextVar("aws_request_id", default=None)
# Context variable for the name of the function being executed.
_function_name_var: ContextVar[Optional[str]] = ContextVar("function_name", default=None)


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def get_function_name() -> Optional[str]:
    """Get the current function name."""
    return _function_name_var.get()


def set_request_id(request_id: Optional[str]) -> Optional[str]:
    _request_id_var.set(request_id)
    return request_id


def bind_lambda_context(context: Any) -> Optional[str]:
    """
    Copy identifying fields of a Lambda context object into the request context.

    Args:
        context: Lambda context object (any object; missing attributes are ignored)

    Returns:
        The request id that was set, if any
    """
    _function_name_var.set(getattr(context, "function_name", None))
    return set_request_id(getattr(context, "aws_request_id", None))


def clear_request_context() -> None:
    """Clear the request context."""
    _request_id_var.set(None)
    _function_name_var.set(None)
