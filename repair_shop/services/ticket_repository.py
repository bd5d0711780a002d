"""
Ticket Repository - CRUD and filtering over the ticket collection

Every operation loads the whole collection from the record store. Mutations
change it in memory and write the whole collection back (last write wins).
They work on the raw stored records, so records that fail validation are
hidden from reads but written back untouched.

Error policy:
- read failures are logged and treated as an empty collection
- write failures propagate as StorageWriteError
- unknown ids are not errors: get/update return None, delete returns False
"""

from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import ValidationError
import structlog

from ..models.ticket import (
    FilterOptions,
    ServiceTicket,
    TicketDraft,
    TicketUpdate,
)
from ..storage.base import TICKETS_KEY, RecordStore, StorageError, StorageReadError
from ..utils.dates import local_date, utcnow

logger = structlog.get_logger(__name__)

IMMUTABLE_FIELDS = ("id", "created_at")


def _record_id(item: Any) -> Optional[str]:
    return item.get("id") if isinstance(item, dict) else None


class TicketRepository:
    """Service tickets stored as one JSON array under TICKETS_KEY"""

    def __init__(self, store: RecordStore):
        self.store = store

    # ========================================
    # LOAD / PERSIST
    # ========================================

    async def _load_records(self) -> List[Any]:
        """
        Stored records exactly as read, invalid ones included

        Raises:
            StorageReadError: Backend failure or unparsable content
        """
        data = await self.store.read(TICKETS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageReadError(
                f"Expected a JSON array under {TICKETS_KEY}, got {type(data).__name__}",
                key=TICKETS_KEY,
            )
        return data

    async def _records(self) -> List[Any]:
        """Stored records for a mutation; an unreadable collection counts as empty"""
        try:
            return await self._load_records()
        except StorageError as e:
            logger.error("tickets_read_failed", error=str(e))
            return []

    @staticmethod
    def _parse(item: Any) -> Optional[ServiceTicket]:
        try:
            return ServiceTicket.model_validate(item)
        except ValidationError as e:
            logger.warning(
                "ticket_record_skipped",
                ticket_id=_record_id(item),
                error=str(e),
            )
            return None

    async def _load(self) -> List[ServiceTicket]:
        """
        Tickets that pass validation; invalid records are skipped, not dropped

        Raises:
            StorageReadError: Backend failure or unparsable content
        """
        tickets = (self._parse(item) for item in await self._load_records())
        return [t for t in tickets if t is not None]

    async def _persist(self, records: List[Any]) -> None:
        await self.store.write(TICKETS_KEY, records)

    # ========================================
    # READ
    # ========================================

    async def list(self) -> List[ServiceTicket]:
        """
        All tickets

        Returns:
            The collection, or [] if nothing is stored or the read failed
        """
        try:
            return await self._load()
        except StorageError as e:
            logger.error("tickets_read_failed", error=str(e))
            return []

    async def get(self, ticket_id: str) -> Optional[ServiceTicket]:
        """Ticket by ID or None"""
        for ticket in await self.list():
            if ticket.id == ticket_id:
                return ticket
        return None

    async def filter(self, options: Union[FilterOptions, Dict[str, Any], None] = None) -> List[ServiceTicket]:
        """
        Tickets matching every given criterion

        Names match as case-insensitive substrings, product type and status
        exactly. The date range applies only when both bounds are given and
        compares the local calendar day of date_received, bounds inclusive.
        """
        if options is None:
            options = FilterOptions()
        elif isinstance(options, dict):
            options = FilterOptions.model_validate(options)

        tickets = await self.list()

        if options.client_name:
            needle = options.client_name.lower()
            tickets = [t for t in tickets if needle in t.client_name.lower()]

        if options.product_type:
            tickets = [t for t in tickets if t.product_type == options.product_type]

        if options.status:
            tickets = [t for t in tickets if t.status == options.status]

        if options.technician_name:
            needle = options.technician_name.lower()
            tickets = [t for t in tickets if needle in t.technician_name.lower()]

        if options.date_range_start and options.date_range_end:
            start, end = options.date_range_start, options.date_range_end
            tickets = [t for t in tickets if start <= local_date(t.date_received) <= end]

        return tickets

    async def client_names(self) -> List[str]:
        """Sorted unique client names"""
        return sorted({t.client_name for t in await self.list()})

    async def technician_names(self) -> List[str]:
        """Sorted unique technician names"""
        return sorted({t.technician_name for t in await self.list()})

    # ========================================
    # WRITE
    # ========================================

    async def create(self, draft: Union[TicketDraft, Dict[str, Any]]) -> ServiceTicket:
        """
        Open a new ticket

        Args:
            draft: Ticket fields without id/created_at/updated_at

        Returns:
            The stored ticket with its new ID and timestamps

        Raises:
            StorageWriteError: The collection could not be written
        """
        if isinstance(draft, dict):
            draft = TicketDraft.model_validate(draft)

        now = utcnow()
        ticket = ServiceTicket(
            **draft.model_dump(),
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
        )

        records = await self._records()
        records.append(ticket.to_json_dict())
        await self._persist(records)

        logger.info(
            "ticket_created",
            ticket_id=ticket.id,
            client_name=ticket.client_name,
            product_type=ticket.product_type.value,
        )
        return ticket

    async def update(
        self,
        ticket_id: str,
        changes: Union[TicketUpdate, Dict[str, Any]],
    ) -> Optional[ServiceTicket]:
        """
        Merge changes into an existing ticket

        Only the given fields are overwritten; updated_at is refreshed,
        id and created_at never change.

        Returns:
            The updated ticket, or None if the ID is unknown

        Raises:
            StorageWriteError: The collection could not be written
        """
        if isinstance(changes, dict):
            changes = TicketUpdate.model_validate(changes)
        fields = changes.changes()
        for name in IMMUTABLE_FIELDS:
            fields.pop(name, None)

        records = await self._records()
        index = next((i for i, item in enumerate(records) if _record_id(item) == ticket_id), None)
        current = self._parse(records[index]) if index is not None else None

        if current is None:
            logger.warning("ticket_not_found", ticket_id=ticket_id)
            return None

        updated = ServiceTicket.model_validate({
            **current.model_dump(),
            **fields,
            "updated_at": max(utcnow(), current.updated_at),
        })
        # Keys this version does not model stay on the record
        records[index] = {**records[index], **updated.to_json_dict()}
        await self._persist(records)

        logger.info("ticket_updated", ticket_id=ticket_id, fields=sorted(fields))
        return updated

    async def delete(self, ticket_id: str) -> bool:
        """
        Delete a ticket

        Returns:
            True if a ticket was removed, False if the ID was unknown
            (nothing is written in that case)

        Raises:
            StorageWriteError: The collection could not be written
        """
        records = await self._records()
        remaining = [item for item in records if _record_id(item) != ticket_id]

        if len(remaining) == len(records):
            logger.warning("ticket_not_found_for_deletion", ticket_id=ticket_id)
            return False

        await self._persist(remaining)
        logger.info("ticket_deleted", ticket_id=ticket_id)
        return True

    async def mark_telegram_sent(self, ticket_id: str, message_id: Optional[str]) -> bool:
        """
        Record that the ticket was posted to the Telegram group

        Returns:
            True if the ticket exists and was updated; False otherwise,
            including when the write failed (logged)
        """
        try:
            updated = await self.update(
                ticket_id,
                TicketUpdate(telegram_sent=True, telegram_message_id=message_id),
            )
        except StorageError as e:
            logger.error("mark_telegram_sent_failed", ticket_id=ticket_id, error=str(e))
            return False
        return updated is not None

    async def clear(self) -> None:
        """
        Remove every ticket

        Raises:
            StorageWriteError: The key could not be removed
        """
        await self.store.remove(TICKETS_KEY)
        logger.info("tickets_cleared")
