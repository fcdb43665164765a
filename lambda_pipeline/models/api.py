"""
API response models.

Options and response envelope used by the API variants of the pipeline.
"""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Headers = Dict[str, str]


class ApiOptions(BaseModel):
    """
    Configuration for API pipelines.

    `headers` is the fallback for both success and error responses;
    `data_headers` / `error_headers` override it per branch.
    `error_pre_handler` is called with the raw error before it is shaped.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    headers: Optional[Headers] = None
    data_headers: Optional[Headers] = None
    error_headers: Optional[Headers] = None
    error_pre_handler: Optional[Callable[[Any], Any]] = None

    def resolve_data_headers(self) -> Headers:
        return dict(self.data_headers or self.headers or {})

    def resolve_error_headers(self) -> Headers:
        return dict(self.error_headers or self.headers or {})


class ApiResponse(BaseModel):
    """API Gateway proxy integration response."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    body: str = ""
    headers: Headers = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
