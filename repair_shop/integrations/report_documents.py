"""
Printable report documents (HTML, A4) for the daily, technician and
product reports

The browser or the OS print service turns them into PDF.
"""

import html
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple

from ..models.reports import TicketSummary
from ..models.ticket import ProductType, ServiceTicket, TicketStatus
from ..utils.dates import local_date
from .telegram import PRODUCT_NAMES

STATUS_LABELS = {
    TicketStatus.PENDING: "În așteptare",
    TicketStatus.IN_PROGRESS: "În curs",
    TicketStatus.COMPLETED: "Finalizat",
    TicketStatus.ON_HOLD: "Suspendat",
}

STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; color: #333; }
.header { border-bottom: 2px solid #000; padding-bottom: 10px; margin-bottom: 20px; }
.title { font-size: 24px; font-weight: bold; margin-bottom: 5px; }
.subtitle { font-size: 12px; color: #666; }
.section { margin-bottom: 20px; }
.section-title { font-size: 14px; font-weight: bold; background-color: #f0f0f0; padding: 8px; margin-bottom: 10px; }
.summary-label { font-weight: bold; display: inline-block; width: 30%; }
table { width: 100%; border-collapse: collapse; }
th { background-color: #e8e8e8; border: 1px solid #bfbfbf; padding: 8px; text-align: left; font-size: 11px; }
td { border: 1px solid #bfbfbf; padding: 8px; font-size: 10px; }
tr:nth-child(even) { background-color: #f9f9f9; }
.footer { margin-top: 20px; padding-top: 10px; border-top: 1px solid #ccc; font-size: 10px; color: #666; text-align: center; }
"""

Column = Tuple[str, Callable[[ServiceTicket], str]]


def format_currency(amount: float) -> str:
    """Romanian money format: 1.234,50 RON"""
    text = f"{amount:,.2f}".replace(",", " ").replace(".", ",").replace(" ", ".")
    return f"{text} RON"


def format_day(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def document_filename(kind: str, subject: str) -> str:
    """'Raport_Zilei' + '15.10.2026' -> 'Raport_Zilei_15-10-2026.html'"""
    safe = "".join(
        c if (c.isascii() and c.isalnum()) or c in "-_" else "_"
        for c in subject.replace(".", "-")
    )
    return f"{kind}_{safe}.html"


def _common_columns(middle: str, middle_value: Callable[[ServiceTicket], str]) -> List[Column]:
    return [
        ("ID", lambda t: t.id[:8]),
        ("Client", lambda t: t.client_name),
        (middle, middle_value),
        ("Status", lambda t: STATUS_LABELS[t.status]),
        ("Cost", lambda t: format_currency(t.cost)),
    ]


def _table(tickets: Sequence[ServiceTicket], columns: List[Column]) -> str:
    head = "".join(f"<th>{html.escape(title)}</th>" for title, _ in columns)
    rows = "".join(
        "<tr>" + "".join(f"<td>{html.escape(value(t))}</td>" for _, value in columns) + "</tr>"
        for t in tickets
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{rows}</tbody></table>"


def _summary(summary: TicketSummary, revenue_label: str) -> str:
    rows = [
        ("Total Fișe:", str(summary.ticket_count)),
        ("Finalizate:", str(summary.completed_count)),
        (revenue_label, format_currency(summary.total_revenue)),
    ]
    body = "".join(
        f'<div><span class="summary-label">{label}</span><span>{value}</span></div>'
        for label, value in rows
    )
    return f'<div class="section"><div class="section-title">Rezumat</div>{body}</div>'


def _document(
    title: str,
    subtitle: str,
    summary: str,
    section_title: str,
    table: str,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = (generated_at or datetime.now()).astimezone()
    return (
        "<!DOCTYPE html>\n"
        '<html lang="ro"><head><meta charset="UTF-8">'
        f"<title>{html.escape(title)}</title><style>{STYLE}</style></head><body>"
        f'<div class="header"><div class="title">{html.escape(title)}</div>'
        f'<div class="subtitle">{html.escape(subtitle)}</div></div>'
        f"{summary}"
        f'<div class="section"><div class="section-title">{section_title}</div>{table}</div>'
        f'<div class="footer">Generat: {generated_at.strftime("%d.%m.%Y, %H:%M:%S")}</div>'
        "</body></html>\n"
    )


def render_daily_report(summary: TicketSummary, day: date, generated_at: Optional[datetime] = None) -> str:
    columns = _common_columns("Produs", lambda t: t.product_model)
    columns.append(("Tehnician", lambda t: t.technician_name or "N/A"))
    return _document(
        "Raport Zilei",
        f"Data: {format_day(day)}",
        _summary(summary, "Venit Total:"),
        "Detalii Fișe",
        _table(summary.tickets, columns),
        generated_at,
    )


def render_technician_report(
    summary: TicketSummary,
    technician_name: str,
    generated_at: Optional[datetime] = None,
) -> str:
    columns = _common_columns("Produs", lambda t: t.product_model)
    columns.append(("Data", lambda t: format_day(local_date(t.date_received))))
    return _document(
        "Raport Tehnician",
        f"Tehnician: {technician_name}",
        _summary(summary, "Venit Generat:"),
        "Fișe Atribuite",
        _table(summary.tickets, columns),
        generated_at,
    )


def render_product_report(
    summary: TicketSummary,
    product_type: ProductType,
    generated_at: Optional[datetime] = None,
) -> str:
    columns = _common_columns("Model", lambda t: t.product_model)
    columns.append(("Tehnician", lambda t: t.technician_name or "N/A"))
    return _document(
        "Raport Produs",
        f"Tip Produs: {PRODUCT_NAMES[product_type]}",
        _summary(summary, "Venit Total:"),
        "Fișe",
        _table(summary.tickets, columns),
        generated_at,
    )
