"""
Settings Repository - the single AppSettings record
"""

from typing import Any, Dict, Optional, Union

from cryptography.fernet import InvalidToken
from pydantic import ValidationError
import structlog

from ..models.settings import AppSettings, AppSettingsUpdate, TelegramConfig
from ..storage.base import SETTINGS_KEY, RecordStore, StorageError
from ..utils.crypto import CredentialCipher

logger = structlog.get_logger(__name__)


class SettingsRepository:
    """
    Read-whole/modify/write-whole access to the settings record

    get() never fails: missing or unreadable settings yield defaults.
    With a cipher configured the bot token is encrypted at rest; callers
    always see plaintext.
    """

    def __init__(self, store: RecordStore, cipher: Optional[CredentialCipher] = None):
        self.store = store
        self.cipher = cipher

    async def get(self) -> AppSettings:
        """Stored settings, or defaults if none are stored yet"""
        try:
            data = await self.store.read(SETTINGS_KEY)
        except StorageError as e:
            logger.error("settings_read_failed", error=str(e))
            return AppSettings()

        if data is None:
            return AppSettings()

        try:
            stored = AppSettings.model_validate(data)
        except ValidationError as e:
            logger.error("settings_invalid", error=str(e))
            return AppSettings()

        return self._decrypt(stored)

    async def update(self, changes: Union[AppSettingsUpdate, Dict[str, Any]]) -> AppSettings:
        """
        Merge changes over the current settings and persist

        Top-level fields are replaced whole (telegram_config included).

        Raises:
            StorageWriteError: The settings could not be written
        """
        if isinstance(changes, dict):
            changes = AppSettingsUpdate.model_validate(changes)

        current = await self.get()
        updated = AppSettings.model_validate({**current.model_dump(), **changes.changes()})

        await self.store.write(SETTINGS_KEY, self._encrypt(updated).to_json_dict())
        logger.info("settings_updated", fields=sorted(changes.changes()))
        return updated

    # ========================================
    # CONVENIENCE ACCESSORS
    # ========================================

    async def get_telegram_config(self) -> TelegramConfig:
        return (await self.get()).telegram_config

    async def update_telegram_config(self, config: TelegramConfig) -> TelegramConfig:
        updated = await self.update(AppSettingsUpdate(telegram_config=config))
        return updated.telegram_config

    async def get_technician_name(self) -> str:
        return (await self.get()).technician_name

    async def update_technician_name(self, name: str) -> str:
        updated = await self.update(AppSettingsUpdate(technician_name=name))
        return updated.technician_name

    async def clear(self) -> None:
        """Drop the settings record; the next get() returns defaults"""
        await self.store.remove(SETTINGS_KEY)
        logger.info("settings_cleared")

    # ========================================
    # TOKEN ENCRYPTION
    # ========================================

    def _encrypt(self, value: AppSettings) -> AppSettings:
        if self.cipher is None:
            return value
        token = self.cipher.encrypt_if_needed(value.telegram_config.bot_token)
        return value.model_copy(
            update={"telegram_config": value.telegram_config.model_copy(update={"bot_token": token})}
        )

    def _decrypt(self, value: AppSettings) -> AppSettings:
        token = value.telegram_config.bot_token
        if self.cipher is None or not self.cipher.is_encrypted(token):
            return value
        try:
            token = self.cipher.decrypt(token)
        except InvalidToken:
            # Stored with another master key; the token must be re-entered
            logger.error("bot_token_decrypt_failed")
            token = ""
        return value.model_copy(
            update={"telegram_config": value.telegram_config.model_copy(update={"bot_token": token})}
        )
