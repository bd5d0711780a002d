"""
Application settings record (a singleton stored under the settings key)
"""

from typing import Any, Literal, Optional

from pydantic import Field, model_validator

from .base import CamelModel

DEFAULT_TECHNICIAN_NAME = "Technician"

Theme = Literal["light", "dark", "auto"]


class TelegramConfig(CamelModel):
    """Credentials for posting tickets to the shop's Telegram group"""

    bot_token: str = Field(default="", description="Bot token from @BotFather")
    group_id: str = Field(default="", description="Target group/chat ID")

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.group_id)


class AppSettings(CamelModel):
    """Technician name, Telegram credentials and UI theme"""

    technician_name: str = Field(default=DEFAULT_TECHNICIAN_NAME)
    telegram_config: TelegramConfig = Field(default_factory=TelegramConfig)
    theme: Theme = Field(default="auto")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class AppSettingsUpdate(CamelModel):
    """Partial settings update; top-level fields are replaced as a whole"""

    technician_name: Optional[str] = None
    telegram_config: Optional[TelegramConfig] = None
    theme: Optional[Theme] = None

    def changes(self) -> dict:
        """Explicitly set fields; a null leaves the stored value as is"""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
