"""
Service ticket models
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel
from ..utils.dates import parse_datetime, to_local_date


class ProductType(str, Enum):
    """Device categories accepted by the shop"""
    LAPTOP = "laptop"
    PC = "pc"
    PHONE = "phone"
    PRINTER = "printer"
    GPS = "gps"
    TV = "tv"
    BOX = "box"
    TABLET = "tablet"


class TicketStatus(str, Enum):
    """Workflow status; any status may change to any other"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


OPEN_STATUSES = frozenset({
    TicketStatus.PENDING,
    TicketStatus.IN_PROGRESS,
    TicketStatus.ON_HOLD,
})

# Text fields that read a stored or explicit null as ""
TEXT_FIELDS = (
    "client_email",
    "product_model",
    "product_serial_number",
    "problem_description",
    "diagnostic",
    "solution_applied",
    "technician_name",
)

# Fields a ticket may hold as null
NULLABLE_FIELDS = frozenset({"date_delivered", "telegram_message_id"})


def _coerce_date(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, (str, date)):
        return parse_datetime(value)
    return value


def _coerce_text(value: Any) -> Any:
    return "" if value is None else value


def _coerce_message_id(value: Any) -> Any:
    # Telegram returns integer message ids
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class TicketFields(CamelModel):
    """Fields a caller provides when opening a ticket"""

    # Client
    client_name: str = Field(..., description="Client name")
    client_phone: str = Field(..., description="Client phone")
    client_email: str = Field(default="")

    # Product
    product_type: ProductType
    product_model: str = Field(default="")
    product_serial_number: str = Field(default="")

    # Service
    problem_description: str = Field(default="")
    diagnostic: str = Field(default="")
    solution_applied: str = Field(default="")
    cost: float = Field(default=0.0, description="Cost in RON")

    # Workflow
    status: TicketStatus = Field(default=TicketStatus.PENDING)
    technician_name: str = Field(default="")

    # Dates
    date_received: datetime
    date_delivered: Optional[datetime] = None

    # Telegram channel state
    telegram_sent: bool = Field(default=False)
    telegram_message_id: Optional[str] = None

    @field_validator("date_received", "date_delivered", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("telegram_message_id", mode="before")
    @classmethod
    def _message_id_to_str(cls, value: Any) -> Any:
        return _coerce_message_id(value)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _null_text_to_empty(cls, value: Any) -> Any:
        return _coerce_text(value)


class TicketDraft(TicketFields):
    """Input for TicketRepository.create (no id, no audit timestamps)"""


class ServiceTicket(TicketFields):
    """One repair job"""

    id: str = Field(..., description="Unique ticket ID (uuid4)")
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_audit_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b7c7f2e-5d0e-4d8e-9f43-2f4f3c0d9a11",
                "clientName": "Ana Pop",
                "clientPhone": "0722111222",
                "productType": "laptop",
                "productModel": "Dell XPS",
                "cost": 250,
                "status": "pending",
                "technicianName": "Ion",
                "dateReceived": "2026-10-18T09:30:00+03:00",
                "createdAt": "2026-10-18T06:30:00Z",
                "updatedAt": "2026-10-18T06:30:00Z",
                "telegramSent": False,
            }
        }
    )

    @property
    def short_id(self) -> str:
        """First 8 characters of the id, as printed on labels"""
        return self.id[:8].upper()


class TicketUpdate(CamelModel):
    """Partial update; only fields that were explicitly set are merged"""

    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    product_type: Optional[ProductType] = None
    product_model: Optional[str] = None
    product_serial_number: Optional[str] = None
    problem_description: Optional[str] = None
    diagnostic: Optional[str] = None
    solution_applied: Optional[str] = None
    cost: Optional[float] = None
    status: Optional[TicketStatus] = None
    technician_name: Optional[str] = None
    date_received: Optional[datetime] = None
    date_delivered: Optional[datetime] = None
    telegram_sent: Optional[bool] = None
    telegram_message_id: Optional[str] = None

    @field_validator("date_received", "date_delivered", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("telegram_message_id", mode="before")
    @classmethod
    def _message_id_to_str(cls, value: Any) -> Any:
        return _coerce_message_id(value)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _null_text_to_empty(cls, value: Any) -> Any:
        return _coerce_text(value)

    def changes(self) -> dict:
        """
        Explicitly set fields, by Python name

        A null for a field that can't hold one (client_name, cost, status...)
        means "leave as is" and is dropped.
        """
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in NULLABLE_FIELDS
        }


class FilterOptions(CamelModel):
    """Ticket search criteria; all optional, combined with AND"""

    client_name: Optional[str] = None
    technician_name: Optional[str] = None
    product_type: Optional[ProductType] = None
    status: Optional[TicketStatus] = None
    date_range_start: Optional[date] = None
    date_range_end: Optional[date] = None

    @field_validator("date_range_start", "date_range_end", mode="before")
    @classmethod
    def _parse_range(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, (str, date)):
            return to_local_date(value)
        return value
