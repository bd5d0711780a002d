"""
Data models shared by the repositories, reports and the API
"""

from .base import CamelModel
from .ticket import (
    OPEN_STATUSES,
    FilterOptions,
    ProductType,
    ServiceTicket,
    TicketDraft,
    TicketStatus,
    TicketUpdate,
)
from .settings import (
    DEFAULT_TECHNICIAN_NAME,
    AppSettings,
    AppSettingsUpdate,
    TelegramConfig,
)
from .reports import (
    ClientReport,
    DashboardStats,
    DataExport,
    DateRange,
    ProductBreakdown,
    ProductReport,
    RevenueReport,
    TechnicianReport,
    TicketSummary,
)

__all__ = [
    "CamelModel",
    "OPEN_STATUSES",
    "FilterOptions",
    "ProductType",
    "ServiceTicket",
    "TicketDraft",
    "TicketStatus",
    "TicketUpdate",
    "DEFAULT_TECHNICIAN_NAME",
    "AppSettings",
    "AppSettingsUpdate",
    "TelegramConfig",
    "ClientReport",
    "DashboardStats",
    "DataExport",
    "DateRange",
    "ProductBreakdown",
    "ProductReport",
    "RevenueReport",
    "TechnicianReport",
    "TicketSummary",
]
