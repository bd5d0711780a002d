"""
Service wiring shared by the routers
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Request

from ..config import Settings
from ..integrations.telegram import TelegramClient
from ..services import (
    DataService,
    ReportGenerator,
    SettingsRepository,
    TicketNotifier,
    TicketRepository,
)
from ..storage import RecordStore, create_record_store
from ..utils.crypto import build_cipher


@dataclass
class ServiceContainer:
    """Everything a request handler needs, built once per app"""

    config: Settings
    store: RecordStore
    tickets: TicketRepository
    settings: SettingsRepository
    reports: ReportGenerator
    data: DataService
    telegram: TelegramClient
    notifier: TicketNotifier

    @classmethod
    def build(
        cls,
        config: Settings,
        store: Optional[RecordStore] = None,
        telegram_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ServiceContainer":
        store = store or create_record_store(config)
        tickets = TicketRepository(store)
        settings = SettingsRepository(store, cipher=build_cipher(config.encryption_master_key))
        telegram = TelegramClient(
            api_base=config.telegram_api_base,
            timeout=config.telegram_timeout,
            transport=telegram_transport,
        )
        return cls(
            config=config,
            store=store,
            tickets=tickets,
            settings=settings,
            reports=ReportGenerator(tickets),
            data=DataService(tickets, settings),
            telegram=telegram,
            notifier=TicketNotifier(tickets, settings, telegram),
        )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
