"""
Error envelope schemas, referenced in the OpenAPI `responses` of each route.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """`{code, message, details}` body returned for every 4xx/5xx."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None
