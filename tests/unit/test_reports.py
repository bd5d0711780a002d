"""
Unit tests for ReportGenerator
"""

from datetime import date, datetime, timezone

import pytest

from repair_shop.models import ProductType, TicketStatus
from repair_shop.services import COST_ESTIMATE_RATIO


def _at(day: int) -> datetime:
    return datetime(2026, 10, day, 12, 0, tzinfo=timezone.utc)


class TestRevenueReport:
    """Tests for revenue_report"""

    async def test_single_completed_ticket(self, ticket_repo, report_generator, make_draft):
        """Test revenue of one completed ticket"""
        await ticket_repo.create(make_draft(
            client_name="Ana Pop", product_type=ProductType.LAPTOP,
            cost=250, status=TicketStatus.COMPLETED, date_received=_at(15),
        ))

        report = await report_generator.revenue_report("2026-10-15", "2026-10-15")

        assert report.ticket_count == 1
        assert report.total_revenue == pytest.approx(250)
        assert report.total_cost == pytest.approx(75)
        assert report.total_profit == pytest.approx(175)
        assert report.average_ticket_value == pytest.approx(250)
        assert report.date_range.start == date(2026, 10, 15)
        assert report.by_product_type[ProductType.LAPTOP].count == 1
        assert report.by_product_type[ProductType.LAPTOP].profit == pytest.approx(175)

    async def test_only_completed_tickets_count(self, ticket_repo, report_generator, make_draft):
        """Test that only completed tickets count as revenue"""
        await ticket_repo.create(make_draft(cost=100, status=TicketStatus.COMPLETED, date_received=_at(2)))
        await ticket_repo.create(make_draft(cost=400, status=TicketStatus.PENDING, date_received=_at(3)))
        await ticket_repo.create(make_draft(
            cost=60, status=TicketStatus.COMPLETED,
            product_type=ProductType.PHONE, date_received=_at(4),
        ))

        report = await report_generator.revenue_report(date(2026, 10, 1), date(2026, 10, 31))

        assert report.ticket_count == 2
        assert report.total_revenue == pytest.approx(160)
        assert report.total_cost == pytest.approx(160 * COST_ESTIMATE_RATIO)
        assert list(report.by_product_type) == [ProductType.LAPTOP, ProductType.PHONE]

    async def test_tickets_outside_range_are_excluded(self, ticket_repo, report_generator, make_draft):
        """Test exclusion of tickets outside the range"""
        await ticket_repo.create(make_draft(cost=100, status=TicketStatus.COMPLETED, date_received=_at(1)))
        await ticket_repo.create(make_draft(cost=200, status=TicketStatus.COMPLETED, date_received=_at(20)))

        report = await report_generator.revenue_report("2026-10-10", "2026-10-31")

        assert report.total_revenue == pytest.approx(200)

    async def test_empty_range_gives_zeros(self, report_generator):
        """Test zero report for an empty range"""
        report = await report_generator.revenue_report("2026-10-01", "2026-10-31")

        assert report.ticket_count == 0
        assert report.total_revenue == 0
        assert report.average_ticket_value == 0
        assert report.by_product_type == {}

    async def test_json_layout(self, ticket_repo, report_generator, make_draft):
        """Test camelCase JSON layout"""
        await ticket_repo.create(make_draft(status=TicketStatus.COMPLETED))

        data = (await report_generator.revenue_report("2026-10-15", "2026-10-15")).to_json_dict()

        assert data["dateRange"] == {"start": "2026-10-15", "end": "2026-10-15"}
        assert "laptop" in data["byProductType"]


class TestTechnicianReport:
    """Tests for technician_report"""

    async def test_totals_cover_all_statuses(self, ticket_repo, report_generator, make_draft):
        """Test technician totals over all statuses"""
        await ticket_repo.create(make_draft(technician_name="Ion", cost=100, status=TicketStatus.COMPLETED))
        await ticket_repo.create(make_draft(technician_name="Ion", cost=50, status=TicketStatus.PENDING))

        reports = await report_generator.technician_report("2026-10-01", "2026-10-31")

        assert len(reports) == 1
        ion = reports[0]
        assert ion.technician_name == "Ion"
        assert ion.ticket_count == 2
        assert ion.completed_count == 1
        assert ion.pending_count == 1
        assert ion.completion_rate == pytest.approx(0.5)
        assert ion.total_revenue == pytest.approx(150)
        assert ion.average_ticket_value == pytest.approx(75)

    async def test_sorted_by_revenue(self, ticket_repo, report_generator, make_draft):
        """Test ordering by revenue"""
        await ticket_repo.create(make_draft(technician_name="Dan", cost=50))
        await ticket_repo.create(make_draft(technician_name="Ion", cost=500))
        await ticket_repo.create(make_draft(technician_name="Eva", cost=120))

        reports = await report_generator.technician_report("2026-10-01", "2026-10-31")

        assert [r.technician_name for r in reports] == ["Ion", "Eva", "Dan"]

    async def test_counts_reconcile_with_filter(self, ticket_repo, report_generator, make_draft):
        """Test that counts match the ticket filter"""
        for day, name in [(1, "Ion"), (5, "Dan"), (9, "Ion"), (25, "Dan")]:
            await ticket_repo.create(make_draft(technician_name=name, date_received=_at(day)))

        reports = await report_generator.technician_report("2026-10-01", "2026-10-10")
        in_range = await ticket_repo.filter({"dateRangeStart": "2026-10-01", "dateRangeEnd": "2026-10-10"})

        assert sum(r.ticket_count for r in reports) == len(in_range) == 3


class TestProductReport:
    """Tests for product_report"""

    async def test_groups_by_product_type(self, ticket_repo, report_generator, make_draft):
        """Test grouping by product type"""
        await ticket_repo.create(make_draft(product_type=ProductType.PHONE, cost=100, status=TicketStatus.COMPLETED))
        await ticket_repo.create(make_draft(product_type=ProductType.PHONE, cost=200))
        await ticket_repo.create(make_draft(product_type=ProductType.PHONE, cost=300))
        await ticket_repo.create(make_draft(product_type=ProductType.TV, cost=900, status=TicketStatus.COMPLETED))

        reports = await report_generator.product_report("2026-10-01", "2026-10-31")

        assert [r.product_type for r in reports] == [ProductType.PHONE, ProductType.TV]
        phone = reports[0]
        assert phone.repair_count == 3
        assert phone.total_revenue == pytest.approx(600)
        assert phone.average_cost == pytest.approx(200)

    async def test_failure_rate_is_completion_ratio(self, ticket_repo, report_generator, make_draft):
        """Test failure rate as completion ratio"""
        await ticket_repo.create(make_draft(status=TicketStatus.COMPLETED))
        await ticket_repo.create(make_draft(status=TicketStatus.COMPLETED))
        await ticket_repo.create(make_draft(status=TicketStatus.ON_HOLD))
        await ticket_repo.create(make_draft(status=TicketStatus.IN_PROGRESS))

        [laptop] = await report_generator.product_report("2026-10-01", "2026-10-31")

        assert laptop.failure_rate == pytest.approx(0.5)

    async def test_no_tickets(self, report_generator):
        """Test product report with no tickets"""
        assert await report_generator.product_report("2026-10-01", "2026-10-31") == []


class TestClientReport:
    """Tests for client_report"""

    async def test_client_history(self, ticket_repo, report_generator, make_draft):
        """Test client history"""
        await ticket_repo.create(make_draft(client_name="Ana Pop", cost=100, date_received=_at(10)))
        await ticket_repo.create(make_draft(client_name="Ana Pop", cost=300, date_received=_at(2)))
        await ticket_repo.create(make_draft(client_name="Vlad", cost=999))

        report = await report_generator.client_report("ana pop")

        assert report.client_name == "Ana Pop"
        assert report.client_phone == "0722111222"
        assert report.ticket_count == 2
        assert report.total_spent == pytest.approx(400)
        assert report.average_ticket_value == pytest.approx(200)
        assert report.first_service_date == _at(2)
        assert report.last_service_date == _at(10)
        assert len(report.tickets) == 2

    async def test_partial_name_does_not_match(self, ticket_repo, report_generator, make_draft):
        """Test that a partial name does not match"""
        await ticket_repo.create(make_draft(client_name="Ana Pop"))

        assert await report_generator.client_report("Ana") is None

    async def test_unknown_client(self, report_generator):
        """Test unknown client"""
        assert await report_generator.client_report("Nobody") is None


class TestDashboardStats:
    """Tests for dashboard_stats"""

    async def test_counters(self, ticket_repo, report_generator, make_draft):
        """Test dashboard counters"""
        await ticket_repo.create(make_draft(cost=250, status=TicketStatus.COMPLETED, date_received=_at(15)))
        await ticket_repo.create(make_draft(cost=100, status=TicketStatus.PENDING, date_received=_at(15)))
        await ticket_repo.create(make_draft(cost=70, status=TicketStatus.ON_HOLD, date_received=_at(3)))

        stats = await report_generator.dashboard_stats(today=date(2026, 10, 15))

        assert stats.total_tickets == 3
        assert stats.completed_tickets == 1
        assert stats.pending_tickets == 2
        assert stats.today_tickets == 2
        assert stats.total_revenue == pytest.approx(250)
        assert stats.average_ticket_value == pytest.approx(250 / 3)

    async def test_empty_collection(self, report_generator):
        """Test dashboard for an empty collection"""
        stats = await report_generator.dashboard_stats()

        assert stats.total_tickets == 0
        assert stats.average_ticket_value == 0

    async def test_read_failure_gives_empty_stats(self, memory_store, report_generator):
        """Test dashboard when the store cannot be read"""
        memory_store.put_raw("@it_service_manager/tickets", "corrupt")

        stats = await report_generator.dashboard_stats()

        assert stats.total_tickets == 0

