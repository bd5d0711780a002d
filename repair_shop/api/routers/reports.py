"""
Reports Router

JSON reports plus printable HTML documents (daily, technician, product)
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from ...integrations.report_documents import (
    document_filename,
    format_day,
    render_daily_report,
    render_product_report,
    render_technician_report,
)
from ...models.reports import (
    ClientReport,
    DashboardStats,
    ProductReport,
    RevenueReport,
    TechnicianReport,
)
from ...models.ticket import ProductType
from ..dependencies import ServiceContainer, get_services

router = APIRouter()


@router.get("/revenue", response_model=RevenueReport)
async def revenue_report(
    start: date = Query(...),
    end: date = Query(...),
    services: ServiceContainer = Depends(get_services),
):
    return await services.reports.revenue_report(start, end)


@router.get("/technicians", response_model=List[TechnicianReport])
async def technician_report(
    start: date = Query(...),
    end: date = Query(...),
    services: ServiceContainer = Depends(get_services),
):
    return await services.reports.technician_report(start, end)


@router.get("/products", response_model=List[ProductReport])
async def product_report(
    start: date = Query(...),
    end: date = Query(...),
    services: ServiceContainer = Depends(get_services),
):
    return await services.reports.product_report(start, end)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(services: ServiceContainer = Depends(get_services)):
    return await services.reports.dashboard_stats()


@router.get("/clients", response_model=List[str])
async def client_names(services: ServiceContainer = Depends(get_services)):
    return await services.tickets.client_names()


@router.get("/technician-names", response_model=List[str])
async def technician_names(services: ServiceContainer = Depends(get_services)):
    return await services.tickets.technician_names()


@router.get("/clients/{client_name}", response_model=ClientReport)
async def client_report(client_name: str, services: ServiceContainer = Depends(get_services)):
    report = await services.reports.client_report(client_name)
    if report is None:
        raise HTTPException(status_code=404, detail=f"No tickets for client {client_name}")
    return report


def _document_response(content: str, filename: str) -> HTMLResponse:
    return HTMLResponse(
        content=content,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.get("/daily/document", response_class=HTMLResponse)
async def daily_document(
    day: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    services: ServiceContainer = Depends(get_services),
):
    day = day or date.today()
    summary = await services.reports.daily_summary(day)
    return _document_response(
        render_daily_report(summary, day),
        document_filename("Raport_Zilei", format_day(day)),
    )


@router.get("/technicians/document", response_class=HTMLResponse)
async def technician_document(
    name: str = Query(..., min_length=1),
    services: ServiceContainer = Depends(get_services),
):
    summary = await services.reports.technician_summary(name)
    return _document_response(
        render_technician_report(summary, name),
        document_filename("Raport_Tehnician", name),
    )


@router.get("/products/document", response_class=HTMLResponse)
async def product_document(
    product_type: ProductType = Query(..., alias="productType"),
    services: ServiceContainer = Depends(get_services),
):
    summary = await services.reports.product_summary(product_type)
    return _document_response(
        render_product_report(summary, product_type),
        document_filename("Raport_Produs", product_type.value),
    )
