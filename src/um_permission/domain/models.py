"""Domain model for um_permission - pure dataclass."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.um_common.datetime_utils import DEFAULT_DATETIME_FORMATS, DateTimeFormats


@dataclass
class Permission:
    id: int
    permission_key: str
    name: str
    description: str | None
    created_at: datetime | None = None
    last_modified_at: datetime | None = None

    def to_dict(self, formats: DateTimeFormats = DEFAULT_DATETIME_FORMATS) -> dict[str, Any]:
        return {
            "id": self.id,
            "permissionKey": self.permission_key,
            "name": self.name,
            "description": self.description,
            "creationDate": formats.to_html(self.created_at),
            "lastModificationDate": formats.to_html(self.last_modified_at),
        }
