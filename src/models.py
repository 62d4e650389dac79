"""Match record models shared by the stores, the API and the dashboard."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.constants import DATE_FORMAT, LEGACY_STATUS_LABELS, TIME_FORMATS


def _is_canonical(value: str, formats) -> bool:
    """True when value is written exactly in one of the strptime formats."""
    for fmt in formats:
        try:
            if datetime.strptime(value, fmt).strftime(fmt) == value:
                return True
        except ValueError:
            continue
    return False


class MatchStatus(str, Enum):
    PENDING = "Pending"
    WON = "Won"
    LOST = "Lost"

    @classmethod
    def parse(cls, value: Any) -> "MatchStatus":
        """Accept a status value or a legacy label; None and "" mean Pending."""
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.PENDING
        label = LEGACY_STATUS_LABELS.get(str(value), str(value))
        return cls(label)

    @classmethod
    def parse_lenient(cls, value: Any) -> "MatchStatus":
        """Like parse, but anything unrecognised falls back to Pending."""
        try:
            return cls.parse(value)
        except ValueError:
            return cls.PENDING


class MatchPayload(BaseModel):
    """Fields a client submits on create and update."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(..., min_length=1, description="Match day, YYYY-MM-DD")
    time: Optional[str] = Field(None, description="Kick-off, HH:MM")
    club: str = Field(..., min_length=1, description="Venue")
    team: str = Field(..., min_length=1, description="Opponent pair")
    result: Optional[str] = None
    status: MatchStatus = MatchStatus.PENDING

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        if not _is_canonical(v, (DATE_FORMAT,)):
            raise ValueError(f"date must be YYYY-MM-DD, got '{v}'")
        return v

    @field_validator("time", "result", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("time")
    @classmethod
    def check_time(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _is_canonical(v, TIME_FORMATS):
            raise ValueError(f"time must be HH:MM or HH:MM:SS, got '{v}'")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return MatchStatus.parse(v)

    def to_record(self) -> Dict[str, Any]:
        """Column values as the stores write them."""
        data = self.model_dump()
        data["status"] = self.status.value
        return data


class Match(MatchPayload):
    """A stored match."""
    id: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Match":
        """Build a Match from a database row, tolerating legacy values."""
        data = dict(row)
        data["status"] = MatchStatus.parse_lenient(data.get("status"))
        if data.get("date") is not None:
            data["date"] = str(data["date"])
        if data.get("time") is not None:
            data["time"] = str(data["time"])
        return cls.model_validate(data)
