"""
Services

- TicketRepository: CRUD and filtering over the ticket collection
- SettingsRepository: the single settings record
- ReportGenerator: revenue/technician/product/client/dashboard reports
- DataService: export and full wipe
- TicketNotifier: Telegram posting and import
"""

from .ticket_repository import TicketRepository
from .settings_repository import SettingsRepository
from .reports import COST_ESTIMATE_RATIO, ReportGenerator
from .data_service import DataService
from .notifications import SyncResult, TicketNotifier

__all__ = [
    "TicketRepository",
    "SettingsRepository",
    "COST_ESTIMATE_RATIO",
    "ReportGenerator",
    "DataService",
    "SyncResult",
    "TicketNotifier",
]
