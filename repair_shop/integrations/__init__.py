"""
External collaborators: Telegram group, thermal labels, QR deep links,
printable report documents
"""

from .deep_links import (
    QRCodeData,
    build_ticket_deep_link,
    parse_ticket_deep_link,
    qr_code_for_ticket,
    telegram_fallback_url,
)
from .labels import (
    ProductLabel,
    render_product_label,
    render_test_label,
    render_ticket_label,
)
from .report_documents import (
    document_filename,
    render_daily_report,
    render_product_report,
    render_technician_report,
)
from .telegram import (
    SendResult,
    TelegramClient,
    TelegramError,
    format_ticket_message,
    format_update_message,
    parse_ticket_from_message,
)

__all__ = [
    "QRCodeData",
    "build_ticket_deep_link",
    "parse_ticket_deep_link",
    "qr_code_for_ticket",
    "telegram_fallback_url",
    "ProductLabel",
    "render_product_label",
    "render_test_label",
    "render_ticket_label",
    "document_filename",
    "render_daily_report",
    "render_product_report",
    "render_technician_report",
    "SendResult",
    "TelegramClient",
    "TelegramError",
    "format_ticket_message",
    "format_update_message",
    "parse_ticket_from_message",
]
