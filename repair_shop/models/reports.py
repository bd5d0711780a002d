"""
Report models; computed on demand, never persisted
"""

from datetime import date, datetime
from typing import Dict, List

from pydantic import Field

from .base import CamelModel
from .settings import AppSettings
from .ticket import ProductType, ServiceTicket


class DateRange(CamelModel):
    start: date
    end: date


class ProductBreakdown(CamelModel):
    """Completed work for one product type inside a revenue report"""

    count: int = 0
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0


class RevenueReport(CamelModel):
    total_revenue: float = 0.0
    total_cost: float = Field(default=0.0, description="Estimated cost of goods")
    total_profit: float = 0.0
    ticket_count: int = Field(default=0, description="Completed tickets in range")
    average_ticket_value: float = 0.0
    date_range: DateRange
    by_product_type: Dict[ProductType, ProductBreakdown] = Field(default_factory=dict)


class TechnicianReport(CamelModel):
    technician_name: str
    ticket_count: int
    completed_count: int
    pending_count: int
    completion_rate: float
    total_revenue: float = Field(..., description="Sum of cost over all statuses")
    average_ticket_value: float
    date_range: DateRange


class ProductReport(CamelModel):
    product_type: ProductType
    repair_count: int
    failure_rate: float = Field(
        ...,
        description="Completed tickets / all tickets for the product type"
    )
    average_cost: float
    total_revenue: float
    date_range: DateRange


class ClientReport(CamelModel):
    client_name: str
    client_phone: str
    client_email: str
    ticket_count: int
    total_spent: float
    first_service_date: datetime
    last_service_date: datetime
    average_ticket_value: float
    tickets: List[ServiceTicket]


class DashboardStats(CamelModel):
    total_tickets: int = 0
    completed_tickets: int = 0
    pending_tickets: int = 0
    today_tickets: int = 0
    total_revenue: float = 0.0
    average_ticket_value: float = 0.0


class TicketSummary(CamelModel):
    """Tickets behind a printable report, with their totals"""

    ticket_count: int = 0
    completed_count: int = 0
    total_revenue: float = Field(default=0.0, description="Sum of cost over completed tickets")
    tickets: List[ServiceTicket] = Field(default_factory=list)


class DataExport(CamelModel):
    """Full dump of the stored data"""

    tickets: List[ServiceTicket]
    settings: AppSettings
    export_date: datetime
