"""
Tickets Router

Endpoints:
- GET /tickets - list / filter tickets
- POST /tickets - open a ticket (and post it to Telegram)
- GET/PATCH/DELETE /tickets/{ticket_id}
- POST /tickets/{ticket_id}/telegram - (re)send to the group
- GET /tickets/{ticket_id}/label - ESC/POS label bytes
- GET /tickets/{ticket_id}/qr - QR deep link payload
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
import structlog

from ...integrations.deep_links import qr_code_for_ticket
from ...integrations.labels import render_ticket_label
from ...models.ticket import (
    FilterOptions,
    ProductType,
    ServiceTicket,
    TicketDraft,
    TicketStatus,
)
from ...utils.dates import utcnow
from ..dependencies import ServiceContainer, get_services
from ..schemas import (
    DeleteResponse,
    QRCodeResponse,
    SendResultResponse,
    TicketCreateRequest,
    TicketPatchRequest,
)

router = APIRouter()
logger = structlog.get_logger(__name__)

ESC_POS_MEDIA_TYPE = "application/octet-stream"


async def _get_or_404(services: ServiceContainer, ticket_id: str) -> ServiceTicket:
    ticket = await services.tickets.get(ticket_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail=f"Ticket {ticket_id} not found")
    return ticket


@router.get("", response_model=List[ServiceTicket])
async def list_tickets(
    client_name: Optional[str] = Query(None, alias="clientName"),
    technician_name: Optional[str] = Query(None, alias="technicianName"),
    product_type: Optional[ProductType] = Query(None, alias="productType"),
    status: Optional[TicketStatus] = Query(None),
    date_range_start: Optional[str] = Query(None, alias="dateRangeStart"),
    date_range_end: Optional[str] = Query(None, alias="dateRangeEnd"),
    services: ServiceContainer = Depends(get_services),
):
    """All tickets, narrowed by any given criteria"""
    options = FilterOptions(
        client_name=client_name,
        technician_name=technician_name,
        product_type=product_type,
        status=status,
        date_range_start=date_range_start,
        date_range_end=date_range_end,
    )
    return await services.tickets.filter(options)


@router.post("", response_model=ServiceTicket, status_code=201)
async def create_ticket(
    body: TicketCreateRequest,
    notify: bool = Query(True, description="Post the new ticket to the Telegram group"),
    services: ServiceContainer = Depends(get_services),
):
    """Open a ticket; a failed Telegram post does not fail the request"""
    fields = body.model_dump()
    fields["date_received"] = body.date_received or utcnow()
    if not body.technician_name:
        fields["technician_name"] = await services.settings.get_technician_name()

    ticket = await services.tickets.create(TicketDraft.model_validate(fields))

    if notify:
        result = await services.notifier.notify_created(ticket)
        if result.success:
            ticket = await services.tickets.get(ticket.id) or ticket

    return ticket


@router.get("/{ticket_id}", response_model=ServiceTicket)
async def get_ticket(ticket_id: str, services: ServiceContainer = Depends(get_services)):
    return await _get_or_404(services, ticket_id)


@router.patch("/{ticket_id}", response_model=ServiceTicket)
async def update_ticket(
    ticket_id: str,
    body: TicketPatchRequest,
    notify: bool = Query(True, description="Post an update notice to the Telegram group"),
    services: ServiceContainer = Depends(get_services),
):
    updated = await services.tickets.update(ticket_id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Ticket {ticket_id} not found")

    if notify:
        result = await services.notifier.notify_updated(updated)
        if result.success:
            updated = await services.tickets.get(ticket_id) or updated

    return updated


@router.delete("/{ticket_id}", response_model=DeleteResponse)
async def delete_ticket(
    ticket_id: str,
    retract: bool = Query(False, description="Also delete the ticket's Telegram group message"),
    services: ServiceContainer = Depends(get_services),
):
    """Deleting an unknown ticket is a no-op reported as deleted=false"""
    if retract:
        ticket = await services.tickets.get(ticket_id)
        if ticket is not None and ticket.telegram_message_id:
            await services.notifier.retract(ticket)
    return DeleteResponse(deleted=await services.tickets.delete(ticket_id))


@router.post("/{ticket_id}/telegram", response_model=SendResultResponse)
async def send_ticket_to_telegram(ticket_id: str, services: ServiceContainer = Depends(get_services)):
    ticket = await _get_or_404(services, ticket_id)
    result = await services.notifier.notify_created(ticket)
    return SendResultResponse(success=result.success, message_id=result.message_id, error=result.error)


@router.get("/{ticket_id}/label")
async def ticket_label(
    ticket_id: str,
    qr: bool = Query(True, description="Print the deep-link QR code"),
    services: ServiceContainer = Depends(get_services),
):
    ticket = await _get_or_404(services, ticket_id)
    content = render_ticket_label(ticket, include_qr=qr, scheme=services.config.deep_link_scheme)
    return Response(content=content, media_type=ESC_POS_MEDIA_TYPE)


@router.get("/{ticket_id}/qr", response_model=QRCodeResponse)
async def ticket_qr(
    ticket_id: str,
    size: int = Query(200, ge=50, le=1000),
    services: ServiceContainer = Depends(get_services),
):
    ticket = await _get_or_404(services, ticket_id)
    config = await services.settings.get_telegram_config()
    qr = qr_code_for_ticket(
        ticket,
        size=size,
        group_id=config.group_id or None,
        scheme=services.config.deep_link_scheme,
    )
    return QRCodeResponse(value=qr.value, size=qr.size, fallback_url=qr.fallback_url)
