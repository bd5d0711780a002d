"""
ESC/POS rendering of thermal labels (62 mm wide roll, 32 chars per line)

- ticket label: 62x50 mm, ID / phone / date / defect + QR deep link
- product label: 62x30 mm, name / specs / price

Rendering only; sending the bytes to a printer is the caller's concern.
"""

from dataclasses import dataclass
from typing import Optional

from ..models.ticket import ServiceTicket
from ..utils.dates import local_date
from .deep_links import DEFAULT_SCHEME, build_ticket_deep_link

CHARS_PER_LINE = 32
PROBLEM_PREVIEW_CHARS = 30
PRINTER_ENCODING = "cp852"

ESC = b"\x1b"
GS = b"\x1d"

INIT = ESC + b"@"
ALIGN_LEFT = ESC + b"a\x00"
ALIGN_CENTER = ESC + b"a\x01"
BOLD_ON = ESC + b"E\x01"
BOLD_OFF = ESC + b"E\x00"
NORMAL_SIZE = GS + b"!\x00"
FEED = b"\n"
SEPARATOR = "═" * 15

# QR error correction levels for GS ( k <fn 169>
QR_LEVELS = {"L": 48, "M": 49, "Q": 50, "H": 51}

# cp852 has cedilla forms only
_ROMANIAN_COMMA_BELOW = str.maketrans("ȘșȚț", "ŞşŢţ")


@dataclass
class ProductLabel:
    product_name: str
    price: float
    specifications: Optional[str] = None


def encode_text(text: str) -> bytes:
    """Printer codepage bytes; unsupported characters become '?'"""
    return text.translate(_ROMANIAN_COMMA_BELOW).encode(PRINTER_ENCODING, errors="replace")


def qr_code_command(data: str, module_size: int = 6, level: str = "H") -> bytes:
    """GS ( k sequence that stores and prints a model 2 QR code"""
    payload = data.encode("ascii", errors="replace")
    store_len = len(payload) + 3
    return b"".join([
        GS + b"(k" + bytes([4, 0, 49, 65, 50, 0]),
        GS + b"(k" + bytes([3, 0, 49, 67, module_size]),
        GS + b"(k" + bytes([3, 0, 49, 69, QR_LEVELS[level]]),
        GS + b"(k" + bytes([store_len % 256, store_len // 256, 49, 80, 48]) + payload,
        GS + b"(k" + bytes([3, 0, 49, 81, 48]),
    ])


def render_ticket_label(
    ticket: ServiceTicket,
    include_qr: bool = True,
    scheme: str = DEFAULT_SCHEME,
) -> bytes:
    """62x50 mm service label stuck on the device"""
    problem = ticket.problem_description[:PROBLEM_PREVIEW_CHARS]

    parts = [
        INIT,
        ALIGN_CENTER, BOLD_ON, encode_text("FIȘĂ SERVICE"), BOLD_OFF, FEED,
        ALIGN_LEFT, encode_text(f"ID: {ticket.short_id}"), FEED,
        FEED,
        encode_text(f"TEL: {ticket.client_phone}"), FEED,
        FEED,
        encode_text(f"DATA: {local_date(ticket.date_received).strftime('%d.%m.%Y')}"), FEED,
        FEED,
        encode_text("DEFECT:"), FEED,
        encode_text(f"{problem}..."), FEED,
        FEED,
    ]
    if include_qr:
        parts += [ALIGN_CENTER, qr_code_command(build_ticket_deep_link(ticket.id, scheme)), FEED]
    parts += [ALIGN_CENTER, encode_text(SEPARATOR), FEED, FEED, FEED]
    return b"".join(parts)


def render_product_label(label: ProductLabel) -> bytes:
    """62x30 mm shelf label, e.g. 'Incarcator Lenovo / 65W Usb-C / PRET 140 RON'"""
    parts = [INIT, ALIGN_CENTER, NORMAL_SIZE, FEED, encode_text(label.product_name), FEED]
    if label.specifications and label.specifications.strip():
        parts += [encode_text(label.specifications), FEED]
    parts += [BOLD_ON, encode_text(f"PRET {label.price:.0f} RON"), BOLD_OFF, FEED, FEED]
    return b"".join(parts)


def render_test_label() -> bytes:
    return b"".join([
        INIT,
        ALIGN_CENTER, BOLD_ON, encode_text("TEST IMPRIMARE"), BOLD_OFF, FEED,
        FEED,
        encode_text("Imprimanta termica"), FEED,
        encode_text("Eticheta 62mm x 50mm"), FEED,
        FEED,
        encode_text(SEPARATOR), FEED,
        FEED, FEED,
    ])
