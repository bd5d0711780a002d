"""
Report Generator - aggregate views derived from the ticket collection

Nothing here is stored; every report rescans the collection. Empty inputs
produce zero counts and zero averages.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

import structlog

from ..models.reports import (
    ClientReport,
    DashboardStats,
    DateRange,
    ProductBreakdown,
    ProductReport,
    RevenueReport,
    TechnicianReport,
    TicketSummary,
)
from ..models.ticket import (
    OPEN_STATUSES,
    FilterOptions,
    ProductType,
    ServiceTicket,
    TicketStatus,
)
from ..utils.dates import DateLike, local_date, to_local_date
from .ticket_repository import TicketRepository

logger = structlog.get_logger(__name__)

# No purchase cost is recorded per ticket, so cost of goods is estimated
COST_ESTIMATE_RATIO = 0.3


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


def _is_completed(ticket: ServiceTicket) -> bool:
    return ticket.status == TicketStatus.COMPLETED


def _summarize(tickets: List[ServiceTicket]) -> TicketSummary:
    completed = [t for t in tickets if _is_completed(t)]
    return TicketSummary(
        ticket_count=len(tickets),
        completed_count=len(completed),
        total_revenue=sum(t.cost for t in completed),
        tickets=tickets,
    )


class ReportGenerator:
    """Revenue, technician, product, client and dashboard reports"""

    def __init__(self, tickets: TicketRepository):
        self.tickets = tickets

    async def _in_range(self, start: DateLike, end: DateLike) -> Tuple[DateRange, List[ServiceTicket]]:
        date_range = DateRange(start=to_local_date(start), end=to_local_date(end))
        tickets = await self.tickets.filter(
            FilterOptions(date_range_start=date_range.start, date_range_end=date_range.end)
        )
        return date_range, tickets

    async def revenue_report(self, start: DateLike, end: DateLike) -> RevenueReport:
        """
        Revenue of completed tickets received in [start, end]

        Cost is estimated as COST_ESTIMATE_RATIO of each ticket's price;
        profit is revenue minus that estimate.
        """
        date_range, tickets = await self._in_range(start, end)
        completed = [t for t in tickets if _is_completed(t)]

        breakdown: Dict[ProductType, ProductBreakdown] = {}
        total_revenue = 0.0
        total_cost = 0.0

        for ticket in completed:
            estimated_cost = ticket.cost * COST_ESTIMATE_RATIO
            total_revenue += ticket.cost
            total_cost += estimated_cost

            entry = breakdown.setdefault(ticket.product_type, ProductBreakdown())
            entry.count += 1
            entry.revenue += ticket.cost
            entry.cost += estimated_cost
            entry.profit = entry.revenue - entry.cost

        by_product_type = {
            product_type: breakdown[product_type]
            for product_type in ProductType
            if product_type in breakdown
        }

        report = RevenueReport(
            total_revenue=total_revenue,
            total_cost=total_cost,
            total_profit=total_revenue - total_cost,
            ticket_count=len(completed),
            average_ticket_value=_ratio(total_revenue, len(completed)),
            date_range=date_range,
            by_product_type=by_product_type,
        )
        logger.debug(
            "revenue_report_generated",
            start=str(date_range.start),
            end=str(date_range.end),
            ticket_count=report.ticket_count,
        )
        return report

    async def technician_report(self, start: DateLike, end: DateLike) -> List[TechnicianReport]:
        """
        Per-technician totals for tickets received in [start, end]

        Revenue sums the cost of every ticket regardless of status (unlike
        the revenue report). Sorted by revenue, highest first.
        """
        date_range, tickets = await self._in_range(start, end)

        groups: Dict[str, List[ServiceTicket]] = {}
        for ticket in tickets:
            groups.setdefault(ticket.technician_name, []).append(ticket)

        reports = []
        for technician_name, group in groups.items():
            completed_count = sum(1 for t in group if _is_completed(t))
            pending_count = sum(1 for t in group if t.status in OPEN_STATUSES)
            total_revenue = sum(t.cost for t in group)

            reports.append(TechnicianReport(
                technician_name=technician_name,
                ticket_count=len(group),
                completed_count=completed_count,
                pending_count=pending_count,
                completion_rate=_ratio(completed_count, len(group)),
                total_revenue=total_revenue,
                average_ticket_value=_ratio(total_revenue, len(group)),
                date_range=date_range,
            ))

        return sorted(reports, key=lambda r: r.total_revenue, reverse=True)

    async def product_report(self, start: DateLike, end: DateLike) -> List[ProductReport]:
        """
        Per-product-type totals for tickets received in [start, end]

        failure_rate holds completed / total for the product type.
        Sorted by repair count, highest first.
        """
        date_range, tickets = await self._in_range(start, end)

        groups: Dict[ProductType, List[ServiceTicket]] = {p: [] for p in ProductType}
        for ticket in tickets:
            groups[ticket.product_type].append(ticket)

        reports = []
        for product_type, group in groups.items():
            if not group:
                continue
            total_revenue = sum(t.cost for t in group)
            completed_count = sum(1 for t in group if _is_completed(t))

            reports.append(ProductReport(
                product_type=product_type,
                repair_count=len(group),
                failure_rate=_ratio(completed_count, len(group)),
                average_cost=_ratio(total_revenue, len(group)),
                total_revenue=total_revenue,
                date_range=date_range,
            ))

        return sorted(reports, key=lambda r: r.repair_count, reverse=True)

    async def client_report(self, client_name: str) -> Optional[ClientReport]:
        """
        History of one client across the whole collection

        The name matches exactly, ignoring case.

        Returns:
            ClientReport or None if the client has no tickets
        """
        needle = client_name.lower()
        client_tickets = [t for t in await self.tickets.list() if t.client_name.lower() == needle]

        if not client_tickets:
            return None

        by_date = sorted(client_tickets, key=lambda t: t.date_received)
        total_spent = sum(t.cost for t in client_tickets)
        first = client_tickets[0]

        return ClientReport(
            client_name=first.client_name,
            client_phone=first.client_phone,
            client_email=first.client_email,
            ticket_count=len(client_tickets),
            total_spent=total_spent,
            first_service_date=by_date[0].date_received,
            last_service_date=by_date[-1].date_received,
            average_ticket_value=_ratio(total_spent, len(client_tickets)),
            tickets=client_tickets,
        )

    async def dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        """
        Whole-collection counters, independent of any date range

        Revenue counts completed tickets only, while the average divides it
        by every ticket in the collection.
        """
        tickets = await self.tickets.list()
        today = today or date.today()

        completed = [t for t in tickets if _is_completed(t)]
        total_revenue = sum(t.cost for t in completed)

        return DashboardStats(
            total_tickets=len(tickets),
            completed_tickets=len(completed),
            pending_tickets=sum(1 for t in tickets if t.status in OPEN_STATUSES),
            today_tickets=sum(1 for t in tickets if local_date(t.date_received) == today),
            total_revenue=total_revenue,
            average_ticket_value=_ratio(total_revenue, len(tickets)),
        )

    # ========================================
    # PRINTABLE REPORT DATA
    # ========================================

    async def daily_summary(self, day: Optional[DateLike] = None) -> TicketSummary:
        """Tickets received on one local calendar day (today by default)"""
        day = to_local_date(day) if day is not None else date.today()
        _, tickets = await self._in_range(day, day)
        return _summarize(tickets)

    async def technician_summary(self, technician_name: str) -> TicketSummary:
        """All tickets assigned to a technician (exact name)"""
        tickets = [t for t in await self.tickets.list() if t.technician_name == technician_name]
        return _summarize(tickets)

    async def product_summary(self, product_type: ProductType) -> TicketSummary:
        """All tickets for one product type"""
        tickets = [t for t in await self.tickets.list() if t.product_type == product_type]
        return _summarize(tickets)
