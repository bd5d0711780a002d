"""
Data export and full wipe
"""

import structlog

from ..models.reports import DataExport
from ..utils.dates import utcnow
from .settings_repository import SettingsRepository
from .ticket_repository import TicketRepository

logger = structlog.get_logger(__name__)


class DataService:
    """Export-only backup of tickets and settings"""

    def __init__(self, tickets: TicketRepository, settings: SettingsRepository):
        self.tickets = tickets
        self.settings = settings

    async def export_all(self) -> DataExport:
        """
        Snapshot of all stored data

        Serialized with to_json_dict() it has the layout
        {"tickets": [...], "settings": {...}, "exportDate": "<ISO timestamp>"}.
        """
        export = DataExport(
            tickets=await self.tickets.list(),
            settings=await self.settings.get(),
            export_date=utcnow(),
        )
        logger.info("data_exported", ticket_count=len(export.tickets))
        return export

    async def clear_all(self) -> None:
        """
        Remove tickets and settings

        Raises:
            StorageWriteError: A key could not be removed
        """
        await self.tickets.clear()
        await self.settings.clear()
        logger.warning("all_data_cleared")
