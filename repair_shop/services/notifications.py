"""
Ticket notifications - posts tickets to the Telegram group and records
the outcome on the ticket

Failed posts are not retried and leave the ticket untouched.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError
import structlog

from ..integrations.telegram import (
    SendResult,
    TelegramClient,
    TelegramError,
    parse_ticket_from_message,
)
from ..models.ticket import ServiceTicket, TicketDraft
from .settings_repository import SettingsRepository
from .ticket_repository import TicketRepository

logger = structlog.get_logger(__name__)


@dataclass
class SyncResult:
    success: bool
    count: int = 0
    error: Optional[str] = None


class TicketNotifier:
    """Glue between the ticket repository and the Telegram client"""

    def __init__(
        self,
        tickets: TicketRepository,
        settings: SettingsRepository,
        telegram: TelegramClient,
    ):
        self.tickets = tickets
        self.settings = settings
        self.telegram = telegram

    async def _record(self, ticket: ServiceTicket, result: SendResult) -> SendResult:
        if result.success:
            await self.tickets.mark_telegram_sent(ticket.id, result.message_id)
        else:
            logger.warning("ticket_notification_failed", ticket_id=ticket.id, error=result.error)
        return result

    async def notify_created(self, ticket: ServiceTicket) -> SendResult:
        """Post a new (or re-sent) ticket to the group"""
        config = await self.settings.get_telegram_config()
        result = await self.telegram.send_ticket(config, ticket)
        return await self._record(ticket, result)

    async def notify_updated(self, ticket: ServiceTicket) -> SendResult:
        """Post an update notice for an edited ticket"""
        config = await self.settings.get_telegram_config()
        result = await self.telegram.send_update(config, ticket)
        return await self._record(ticket, result)

    async def retract(self, ticket: ServiceTicket) -> SendResult:
        """Delete the ticket's last group message, if any"""
        config = await self.settings.get_telegram_config()
        return await self.telegram.delete_message(config, ticket.telegram_message_id)

    async def test_connection(self) -> SendResult:
        config = await self.settings.get_telegram_config()
        return await self.telegram.test_connection(config)

    async def sync_from_telegram(self) -> SyncResult:
        """
        Import tickets posted to the group as JSON messages

        Best effort: only updates still buffered by Telegram are seen, and a
        message is skipped when a ticket with its message id already exists.

        Raises:
            StorageWriteError: An imported ticket could not be stored
        """
        config = await self.settings.get_telegram_config()

        if not config.is_configured:
            return SyncResult(
                success=False,
                error="Token-ul Telegram sau ID-ul grupului nu sunt configurate",
            )
        if ":" not in config.bot_token:
            return SyncResult(success=False, error="Token-ul Telegram este invalid")
        try:
            int(config.group_id)
        except ValueError:
            return SyncResult(success=False, error="ID-ul grupului Telegram este invalid")

        try:
            await self.telegram.get_me(config.bot_token)
            updates = await self.telegram.get_updates(config.bot_token)
        except TelegramError as e:
            logger.error("telegram_sync_failed", error=str(e))
            return SyncResult(success=False, error=str(e))

        known_ids = {t.telegram_message_id for t in await self.tickets.list() if t.telegram_message_id}
        imported = 0

        for update in updates:
            message = update.get("message") or update.get("channel_post")
            if not message or str(message.get("chat", {}).get("id")) != config.group_id:
                continue

            fields = parse_ticket_from_message(message.get("text") or "")
            if fields is None:
                continue

            message_id = fields["telegramMessageId"] or str(message.get("message_id"))
            if message_id in known_ids:
                continue

            try:
                draft = TicketDraft.model_validate({**fields, "telegramMessageId": message_id})
            except ValidationError as e:
                logger.warning("telegram_ticket_invalid", message_id=message_id, error=str(e))
                continue

            await self.tickets.create(draft)
            known_ids.add(message_id)
            imported += 1

        logger.info("telegram_sync_completed", imported=imported, updates=len(updates))
        return SyncResult(success=True, count=imported)
