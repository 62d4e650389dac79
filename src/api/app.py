import sys
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import List, Optional

project_root = Path(__file__).resolve().parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from config.settings import settings
from src.api.schemas import ErrorResponse, HealthResponse, Match, MatchPayload, MessageResponse
from src.errors import MatchNotFoundError, StoreError
from src.store.base import MatchStore
from src.store.factory import get_store

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("API")

REQUIRED_FIELDS = {"date", "club", "team"}

STORE_ERROR = {500: {"model": ErrorResponse, "description": "Store failure"}}
BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Missing or malformed fields"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Unknown id (strict existence checking)"}}

# Global state for the record store
_store: Optional[MatchStore] = None


def get_match_store() -> MatchStore:
    """Return the configured record store, building it on first use."""
    global _store
    if _store is None:
        _store = get_store(settings)
    return _store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the record store on startup and drop it on shutdown."""
    global _store
    try:
        store = get_match_store()
        logger.info(f"Using '{store.backend}' match store")
    except StoreError as e:
        logger.error(f"Failed to open match store: {e}")
        raise
    yield
    _store = None


app = FastAPI(title=settings.APP_TITLE, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(MatchNotFoundError)
async def not_found_handler(request: Request, exc: MatchNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


def describe_validation_errors(errors: list) -> str:
    """Turn pydantic errors into one client-facing message."""
    for err in errors:
        loc = err.get("loc", ())
        field = loc[-1] if loc else None
        if field in REQUIRED_FIELDS and (
            err.get("type") in ("missing", "string_too_short") or err.get("input") is None
        ):
            return "Missing required fields"
        if field == "body" and err.get("type") == "missing":
            return "Missing required fields"
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"Invalid match data: {where}: {first.get('msg', 'invalid value')}"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = describe_validation_errors(exc.errors())
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/health", response_model=HealthResponse)
def health_check(store: MatchStore = Depends(get_match_store)):
    """Health check endpoint."""
    store_ok = store.ping()
    return {
        "status": "healthy" if store_ok else "degraded",
        "backend": store.backend,
        "store_ok": store_ok,
        "strict_existence_checking": settings.STRICT_EXISTENCE_CHECKING,
    }


@app.get("/api/matches", response_model=List[Match], responses=STORE_ERROR)
def list_matches(store: MatchStore = Depends(get_match_store)):
    """Return every match, newest date first."""
    try:
        return store.list_all()
    except Exception as e:
        logger.error(f"Fetch error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch matches")


@app.post("/api/matches", response_model=Match, status_code=201,
          responses={**BAD_REQUEST, **STORE_ERROR})
def create_match(payload: MatchPayload, store: MatchStore = Depends(get_match_store)):
    """Store a new match; the store assigns its id."""
    try:
        return store.insert(payload)
    except Exception as e:
        logger.error(f"Insert error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save match")


@app.put("/api/matches/{match_id}", response_model=Match,
         responses={**BAD_REQUEST, **NOT_FOUND, **STORE_ERROR})
def update_match(match_id: int, payload: MatchPayload, store: MatchStore = Depends(get_match_store)):
    """Replace every field of a match except its id."""
    try:
        updated = store.update(match_id, payload)
    except Exception as e:
        logger.error(f"Update error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update match")

    if updated is None:
        if settings.STRICT_EXISTENCE_CHECKING:
            raise MatchNotFoundError(match_id)
        logger.warning(f"Update of match {match_id} matched no row; echoing payload")
        return Match(id=match_id, **payload.model_dump())
    return updated


@app.delete("/api/matches/{match_id}", response_model=MessageResponse,
            responses={**BAD_REQUEST, **NOT_FOUND, **STORE_ERROR})
def delete_match(match_id: int, store: MatchStore = Depends(get_match_store)):
    """Delete a match."""
    try:
        deleted = store.delete(match_id)
    except Exception as e:
        logger.error(f"Delete error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete match")

    if not deleted:
        if settings.STRICT_EXISTENCE_CHECKING:
            raise MatchNotFoundError(match_id)
        logger.warning(f"Delete of match {match_id} matched no row")
    return {"message": "Match deleted"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
