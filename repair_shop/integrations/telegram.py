"""
Telegram Bot API client for the shop's group channel

Posting never raises: every outcome is returned as a result object so a
failed notification can't break the ticket workflow that triggered it.
"""

import html
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import structlog

from ..models.settings import TelegramConfig
from ..models.ticket import ProductType, ServiceTicket, TicketStatus
from ..utils.dates import local_date, utcnow

logger = structlog.get_logger(__name__)

CONFIG_MISSING_ERROR = (
    "Telegram configuration is missing. "
    "Please configure bot token and group ID in settings."
)

PRODUCT_NAMES: Dict[ProductType, str] = {
    ProductType.LAPTOP: "Laptop",
    ProductType.PC: "PC",
    ProductType.PHONE: "Telefon",
    ProductType.PRINTER: "Imprimantă",
    ProductType.GPS: "GPS",
    ProductType.TV: "TV",
    ProductType.BOX: "Box",
    ProductType.TABLET: "Tabletă",
}

STATUS_NAMES: Dict[TicketStatus, str] = {
    TicketStatus.PENDING: "⏳ În așteptare",
    TicketStatus.IN_PROGRESS: "🔧 În curs",
    TicketStatus.COMPLETED: "✅ Finalizat",
    TicketStatus.ON_HOLD: "⏸️ Suspendat",
}


@dataclass
class SendResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


def _fmt_date(value: Optional[datetime]) -> str:
    if value is None:
        return "N/A"
    return local_date(value).strftime("%d.%m.%Y")


def format_ticket_message(ticket: ServiceTicket) -> str:
    """HTML summary of a ticket for the group chat"""
    e = html.escape
    lines = [
        "📋 <b>FIȘĂ DE SERVICE</b>",
        "",
        "<b>👤 CLIENT:</b>",
        f"• Nume: {e(ticket.client_name)}",
        f"• Telefon: {e(ticket.client_phone)}",
        f"• Email: {e(ticket.client_email)}",
        "",
        "<b>📱 PRODUS:</b>",
        f"• Tip: {PRODUCT_NAMES[ticket.product_type]}",
        f"• Model: {e(ticket.product_model)}",
        f"• Serie: {e(ticket.product_serial_number)}",
        "",
        "<b>🔍 DIAGNOSTIC:</b>",
        e(ticket.problem_description),
        "",
        "<b>🛠️ SOLUȚIE:</b>",
        e(ticket.solution_applied),
        "",
        f"<b>💰 COST:</b> {ticket.cost:g} RON",
        "",
        f"<b>👨‍🔧 TEHNICIAN:</b> {e(ticket.technician_name)}",
        "",
        "<b>📅 DATE:</b>",
        f"• Primit: {_fmt_date(ticket.date_received)}",
        f"• Predat: {_fmt_date(ticket.date_delivered)}",
        "",
        f"<b>📊 STATUS:</b> {STATUS_NAMES[ticket.status]}",
        "",
        f"<i>ID: {ticket.id}</i>",
    ]
    return "\n".join(lines)


def format_update_message(ticket: ServiceTicket, updated_at: Optional[datetime] = None) -> str:
    """Ticket summary framed as an update notice"""
    updated_at = (updated_at or utcnow()).astimezone()
    return (
        "🔄 <b>ACTUALIZARE FIȘĂ</b>\n\n"
        f"{format_ticket_message(ticket)}\n\n"
        f"<i>Actualizat: {updated_at.strftime('%d.%m.%Y, %H:%M:%S')}</i>"
    )


def parse_ticket_from_message(text: str) -> Optional[Dict[str, Any]]:
    """
    Ticket fields from a JSON message posted in the group

    Only objects carrying at least clientName and productType are accepted.

    Returns:
        Field dict ready for TicketDraft validation, or None
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict) or not data.get("clientName") or not data.get("productType"):
        return None

    return {
        "clientName": data["clientName"],
        "clientPhone": data.get("clientPhone") or "",
        "clientEmail": data.get("clientEmail") or "",
        "productType": data["productType"],
        "productModel": data.get("productModel") or "",
        "productSerialNumber": data.get("productSerialNumber") or "",
        "problemDescription": data.get("problemDescription") or "",
        "diagnostic": data.get("diagnostic") or "",
        "solutionApplied": data.get("solutionApplied") or "",
        "cost": data.get("cost") or 0,
        "status": data.get("status") or TicketStatus.PENDING.value,
        "technicianName": data.get("technicianName") or "Tehnician",
        "dateReceived": data.get("dateReceived") or utcnow(),
        "dateDelivered": data.get("dateDelivered") or None,
        "telegramSent": True,
        "telegramMessageId": data.get("telegramMessageId") or None,
    }


class TelegramError(Exception):
    """Bot API call failed (transport error or ok=false)"""


class TelegramClient:
    """Thin async wrapper over the Bot API methods the shop uses"""

    def __init__(
        self,
        api_base: str = "https://api.telegram.org",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()

    async def _call(
        self,
        token: str,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Call a Bot API method

        Returns:
            The "result" field of the response

        Raises:
            TelegramError: Transport failure, non-JSON body or ok=false
        """
        url = f"{self.api_base}/bot{token}/{method}"
        try:
            if payload is None:
                response = await self.client.get(url)
            else:
                response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise TelegramError(f"Telegram API unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            raise TelegramError(f"Telegram API returned HTTP {response.status_code}")

        if not response.is_success or not data.get("ok"):
            raise TelegramError(data.get("description") or f"Telegram API returned HTTP {response.status_code}")

        return data.get("result")

    async def send_message(self, config: TelegramConfig, text: str) -> SendResult:
        """Send an HTML message to the configured group"""
        if not config.is_configured:
            return SendResult(success=False, error=CONFIG_MISSING_ERROR)

        try:
            result = await self._call(
                config.bot_token,
                "sendMessage",
                {"chat_id": config.group_id, "text": text, "parse_mode": "HTML"},
            )
        except TelegramError as e:
            logger.error("telegram_send_failed", group_id=config.group_id, error=str(e))
            return SendResult(success=False, error=str(e))

        message_id = str(result["message_id"]) if isinstance(result, dict) and "message_id" in result else None
        logger.info("telegram_message_sent", group_id=config.group_id, message_id=message_id)
        return SendResult(success=True, message_id=message_id)

    async def send_ticket(self, config: TelegramConfig, ticket: ServiceTicket) -> SendResult:
        return await self.send_message(config, format_ticket_message(ticket))

    async def send_update(self, config: TelegramConfig, ticket: ServiceTicket) -> SendResult:
        return await self.send_message(config, format_update_message(ticket))

    async def delete_message(self, config: TelegramConfig, message_id: Optional[str]) -> SendResult:
        """Remove a previously posted message from the group"""
        if not config.is_configured:
            return SendResult(success=False, error=CONFIG_MISSING_ERROR)
        if not message_id:
            return SendResult(success=False, error="Message ID is missing.")

        try:
            await self._call(
                config.bot_token,
                "deleteMessage",
                {"chat_id": config.group_id, "message_id": int(message_id)},
            )
        except (TelegramError, ValueError) as e:
            logger.error("telegram_delete_failed", message_id=message_id, error=str(e))
            return SendResult(success=False, error=str(e))

        logger.info("telegram_message_deleted", message_id=message_id)
        return SendResult(success=True, message_id=message_id)

    async def test_connection(self, config: TelegramConfig) -> SendResult:
        """Check the bot token (getMe) and that the bot may post to the group"""
        if not config.is_configured:
            return SendResult(success=False, error=CONFIG_MISSING_ERROR)

        try:
            await self._call(config.bot_token, "getMe")
        except TelegramError as e:
            logger.warning("telegram_token_invalid", error=str(e))
            return SendResult(success=False, error="Invalid bot token")

        result = await self.send_message(config, "✅ Conexiune Telegram testată cu succes!")
        if not result.success:
            return SendResult(
                success=False,
                error="Invalid group ID or bot does not have permission to send messages",
            )
        return result

    async def get_me(self, token: str) -> Dict[str, Any]:
        """
        Raises:
            TelegramError: Invalid token or API unreachable
        """
        return await self._call(token, "getMe")

    async def get_updates(self, token: str, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Recent updates buffered for the bot (only kept by Telegram for 24h)

        Raises:
            TelegramError: Invalid token or API unreachable
        """
        result = await self._call(token, "getUpdates", {"limit": limit, "allowed_updates": ["message", "channel_post"]})
        return result or []
