"""
Deep Links Router - resolves scanned QR codes to tickets
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ...integrations.deep_links import parse_ticket_deep_link, telegram_fallback_url
from ...models.ticket import ServiceTicket
from ..dependencies import ServiceContainer, get_services

router = APIRouter()


@router.get("/resolve", response_model=ServiceTicket)
async def resolve_link(
    url: str = Query(..., description="Scanned deep link"),
    services: ServiceContainer = Depends(get_services),
):
    ticket_id = parse_ticket_deep_link(url, scheme=services.config.deep_link_scheme)
    if ticket_id is None:
        raise HTTPException(status_code=400, detail="Not a ticket link")

    ticket = await services.tickets.get(ticket_id)
    if ticket is None:
        config = await services.settings.get_telegram_config()
        raise HTTPException(
            status_code=404,
            detail={
                "message": f"Ticket {ticket_id} not found",
                "fallbackUrl": telegram_fallback_url(ticket_id, config.group_id or None),
            },
        )
    return ticket
