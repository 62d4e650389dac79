from pydantic import BaseModel

from src.models import Match, MatchPayload, MatchStatus


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    backend: str
    store_ok: bool
    strict_existence_checking: bool


__all__ = ["Match", "MatchPayload", "MatchStatus", "MessageResponse", "ErrorResponse", "HealthResponse"]
