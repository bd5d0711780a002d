"""
Ticket deep links (the payload of printed QR codes)

Format: <scheme>://ticket/<TICKET_ID>
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..models.ticket import ServiceTicket

DEFAULT_SCHEME = "itservice"
TELEGRAM_SEARCH_URL = "https://t.me/search?q={ticket_id}"


def build_ticket_deep_link(ticket_id: str, scheme: str = DEFAULT_SCHEME) -> str:
    return f"{scheme}://ticket/{ticket_id}"


def parse_ticket_deep_link(url: str, scheme: str = DEFAULT_SCHEME) -> Optional[str]:
    """Ticket ID from a deep link, or None if the URL is not one"""
    if not url:
        return None
    match = re.search(rf"{re.escape(scheme)}://ticket/([a-zA-Z0-9-]+)", url)
    return match.group(1) if match else None


def telegram_fallback_url(ticket_id: str, group_id: Optional[str] = None) -> str:
    """Telegram search link for devices without the app; empty without a group"""
    if not group_id or not ticket_id:
        return ""
    return TELEGRAM_SEARCH_URL.format(ticket_id=ticket_id)


@dataclass
class QRCodeData:
    value: str
    size: int
    fallback_url: str = ""


def qr_code_for_ticket(
    ticket: ServiceTicket,
    size: int = 200,
    group_id: Optional[str] = None,
    scheme: str = DEFAULT_SCHEME,
) -> QRCodeData:
    """QR payload for a ticket label"""
    return QRCodeData(
        value=build_ticket_deep_link(ticket.id, scheme),
        size=size,
        fallback_url=telegram_fallback_url(ticket.id, group_id),
    )
