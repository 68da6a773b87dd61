"""Error body returned by the product API."""

from pydantic import BaseModel, Field


class APIError(BaseModel):
    code: int = Field(..., description="HTTP status code")
    message: str
    operation: str = Field(..., description='e.g. "PUT /api/v1/product/update/"')
    embedded_error: str = Field("", alias="embeddedError")

    model_config = {"populate_by_name": True}


def format_operation(method: str, path: str) -> str:
    return f"{method} {path}"
