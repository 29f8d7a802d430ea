from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

UNKNOWN_NUMBER = "unknown number"


class LookupRequest(BaseModel):
    phone: str
    email: str


class InsightPayload(BaseModel):
    """
    Raw body of a Nexmo Number Insight callback.

    The body is forwarded as-is in the email; only the number is read
    out of it, for the subject line.
    """

    raw: str

    def _fields(self) -> dict[str, Any]:
        try:
            data = json.loads(self.raw)
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def display_number(self) -> str:
        fields = self._fields()
        for key in ("national_format_number", "number"):
            value = fields.get(key)
            if value:
                return str(value)
        return UNKNOWN_NUMBER

    @property
    def subject(self) -> str:
        return f"Nexmo insight for {self.display_number}"
