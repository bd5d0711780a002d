"""
Request/Response models for the HTTP API

Request models are where user input is validated; the repositories
trust what they are given.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field, field_validator

from ..models.base import CamelModel
from ..models.ticket import TicketDraft, TicketUpdate


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class TicketCreateRequest(TicketDraft):
    """New ticket; technician and reception date default from settings / now"""

    cost: float = Field(default=0.0, ge=0, description="Cost in RON")
    date_received: Optional[datetime] = None

    @field_validator("client_name", "client_phone")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)


class TicketPatchRequest(TicketUpdate):
    cost: Optional[float] = Field(default=None, ge=0)

    @field_validator("client_name", "client_phone")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)


class ProductLabelRequest(CamelModel):
    product_name: str = Field(..., min_length=1)
    specifications: Optional[str] = None
    price: float = Field(..., ge=0)


class SendResultResponse(CamelModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class SyncResponse(CamelModel):
    success: bool
    count: int
    error: Optional[str] = None


class DeleteResponse(CamelModel):
    deleted: bool


class QRCodeResponse(CamelModel):
    value: str
    size: int
    fallback_url: str = ""


class HealthResponse(CamelModel):
    status: str
    version: str
    services: Dict[str, bool]
    timestamp: datetime
