"""Dashboard UI state.

The page holds exactly one UIState. Every button press becomes an action and
goes through reduce(), so only one panel can be open at a time.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

import pydantic
from pydantic import BaseModel, ConfigDict

from src.errors import ValidationError
from src.models import Match, MatchPayload, MatchStatus
from src.views import shift_month


class UIMode(str, Enum):
    IDLE = "idle"
    FORM = "form"
    CALENDAR = "calendar"
    STATS = "stats"


class MatchDraft(BaseModel):
    """Form contents while creating or editing a match."""
    model_config = ConfigDict(frozen=True)

    date: str
    time: str = ""
    club: str = ""
    team: str = ""
    result: str = ""
    status: MatchStatus = MatchStatus.PENDING

    @classmethod
    def blank(cls, today: date) -> "MatchDraft":
        return cls(date=today.isoformat())

    @classmethod
    def from_match(cls, match: Match) -> "MatchDraft":
        return cls(
            date=match.date,
            time=(match.time or "")[:5],
            club=match.club,
            team=match.team,
            result=match.result or "",
            status=match.status or MatchStatus.PENDING,
        )

    def to_payload(self) -> MatchPayload:
        """Validate the draft the same way the API will."""
        try:
            return MatchPayload(**self.model_dump())
        except pydantic.ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ValidationError(f"Please check: {', '.join(fields)}") from e


class UIState(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: UIMode = UIMode.IDLE
    editing_id: Optional[int] = None
    confirming_delete: bool = False
    draft: MatchDraft
    calendar_cursor: date
    error: Optional[str] = None

    @classmethod
    def initial(cls, today: date) -> "UIState":
        return cls(draft=MatchDraft.blank(today), calendar_cursor=today.replace(day=1))


# Actions

class Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class OpenForm(Action):
    match: Optional[Match] = None


class EditDraft(Action):
    changes: Dict[str, Any]


class OpenCalendar(Action):
    pass


class OpenStats(Action):
    pass


class ChangeMonth(Action):
    offset: int


class RequestDelete(Action):
    pass


class CancelDelete(Action):
    pass


class CloseModal(Action):
    pass


class SaveSucceeded(Action):
    pass


class FetchFailed(Action):
    message: str


class FetchSucceeded(Action):
    pass


def _closed(state: UIState, today: date) -> UIState:
    return state.model_copy(update={
        "mode": UIMode.IDLE,
        "editing_id": None,
        "confirming_delete": False,
        "draft": MatchDraft.blank(today),
    })


def delete_confirmed(state: UIState) -> bool:
    """True once the user has asked to delete the match being edited and not backed out."""
    return state.mode == UIMode.FORM and state.editing_id is not None and state.confirming_delete


def reduce(state: UIState, action: Action, today: Optional[date] = None) -> UIState:
    """Return the state that follows `action`. The input state is not modified."""
    today = today or date.today()

    if isinstance(action, OpenForm):
        if action.match is not None:
            return state.model_copy(update={
                "mode": UIMode.FORM,
                "editing_id": action.match.id,
                "confirming_delete": False,
                "draft": MatchDraft.from_match(action.match),
            })
        return state.model_copy(update={
            "mode": UIMode.FORM,
            "editing_id": None,
            "confirming_delete": False,
            "draft": MatchDraft.blank(today),
        })

    if isinstance(action, EditDraft):
        if state.mode != UIMode.FORM:
            return state
        draft = MatchDraft(**{**state.draft.model_dump(), **action.changes})
        return state.model_copy(update={"draft": draft})

    if isinstance(action, OpenCalendar):
        return state.model_copy(update={
            "mode": UIMode.CALENDAR, "editing_id": None, "confirming_delete": False
        })

    if isinstance(action, OpenStats):
        return state.model_copy(update={
            "mode": UIMode.STATS, "editing_id": None, "confirming_delete": False
        })

    if isinstance(action, ChangeMonth):
        if state.mode != UIMode.CALENDAR:
            return state
        return state.model_copy(update={
            "calendar_cursor": shift_month(state.calendar_cursor, action.offset)
        })

    if isinstance(action, RequestDelete):
        if state.mode != UIMode.FORM or state.editing_id is None:
            return state
        return state.model_copy(update={"confirming_delete": True})

    if isinstance(action, CancelDelete):
        return state.model_copy(update={"confirming_delete": False})

    if isinstance(action, (CloseModal, SaveSucceeded)):
        return _closed(state, today)

    if isinstance(action, FetchFailed):
        return state.model_copy(update={"error": action.message})

    if isinstance(action, FetchSucceeded):
        return state.model_copy(update={"error": None})

    raise TypeError(f"Unknown action: {type(action).__name__}")
