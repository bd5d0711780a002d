"""
Base model: snake_case in Python, camelCase in stored/exported JSON
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads both naming styles and dumps camelCase with by_alias=True"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """JSON-ready dict in the persisted (camelCase) layout"""
        return self.model_dump(mode="json", by_alias=True)
