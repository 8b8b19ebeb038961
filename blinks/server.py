"""
Blinks Server

FastAPI service exposing the capture commands over HTTP.

Endpoints:
- POST /capture/quick: Quick capture (type from inline markers)
- POST /capture: Capture with an explicit type
- GET /blinks: List Blinks (runs the hourly cleanup first)
- GET /blinks/{blink_id}: One Blink, with its Markdown detail page
- PATCH /blinks/{blink_id}: Edit a Blink
- POST /blinks/{blink_id}/toggle: Complete or reopen a reminder
- DELETE /blinks/{blink_id}: Delete (archive) a Blink
- POST /cleanup: Delete finished reminders now
- GET /health: Health check

Failures come back as JSON ``{"title": ..., "message": ...}``.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .common.config import BlinksConfig, ensure_directories, load_config
from .common.errors import (
    AIAccessError,
    BlinkError,
    BlinkNotFoundError,
    ConfigError,
    StorageError,
    ValidationError,
)
from .capture.browser import StaticTabProvider, TabProvider
from .capture.service import CaptureRequest, CaptureService, EditRequest, build_service
from .views import SORT_OPTIONS, display_info, filter_and_sort, render_detail


# Global state
config: Optional[BlinksConfig] = None
service: Optional[CaptureService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize components on startup"""
    global config, service

    print("[Blinks] Starting up...")
    ensure_directories()

    config = load_config()
    print(f"[Blinks] Loaded config (storage: {config.storage.backend}, llm: {config.llm.provider})")

    try:
        service = build_service(config)
        print("[Blinks] Ready")
    except ConfigError as e:
        service = None
        print(f"[Blinks] Warning: {e}")

    yield

    print("[Blinks] Shutting down...")


app = FastAPI(
    title="Blinks",
    description="Quick capture for thoughts, reminders, bookmarks and quotes",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Request/Response Models
# =============================================================================

class ActiveTab(BaseModel):
    """Active browser tab supplied by the caller"""
    url: str
    title: str = ""


class QuickCaptureSubmission(BaseModel):
    text: str
    active_tab: Optional[ActiveTab] = None


class CaptureSubmission(BaseModel):
    type: str = "thought"
    text: str = ""
    source: Optional[str] = None
    reminder_date: Optional[datetime] = None
    use_browser_tab: bool = False
    active_tab: Optional[ActiveTab] = None


class EditSubmission(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    author: Optional[str] = None
    reminder_date: Optional[datetime] = None


def _tabs(active_tab: Optional[ActiveTab]) -> Optional[TabProvider]:
    if active_tab is None:
        return None
    return StaticTabProvider.single(active_tab.url, active_tab.title)


def get_service() -> CaptureService:
    if service is None:
        raise ConfigError("Blinks not configured. Set a Notion token and database id, or enable local storage.")
    return service


# =============================================================================
# Error handling
# =============================================================================

def _status_for(error: BlinkError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AIAccessError):
        return 403
    if isinstance(error, BlinkNotFoundError):
        return 404
    if isinstance(error, ConfigError):
        return 503
    if isinstance(error, StorageError):
        return 502
    return 500


@app.exception_handler(BlinkError)
async def blink_error_handler(request: Request, error: BlinkError):
    # Command boundaries stamp their notification title on the error
    return JSONResponse(
        status_code=_status_for(error),
        content={"title": error.title, "message": str(error)},
    )


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/health")
async def health():
    return {
        "status": "ok" if service is not None else "unconfigured",
        "storage": config.storage.backend if config else None,
    }


@app.post("/capture/quick", status_code=201)
def quick_capture(submission: QuickCaptureSubmission):
    blink = get_service().quick_capture(submission.text, tab_provider=_tabs(submission.active_tab))
    return blink.to_json()


@app.post("/capture", status_code=201)
def capture(submission: CaptureSubmission):
    request = CaptureRequest(
        type=submission.type,
        text=submission.text,
        source=submission.source,
        reminder_date=submission.reminder_date,
        use_browser_tab=submission.use_browser_tab,
    )
    blink = get_service().capture(request, tab_provider=_tabs(submission.active_tab))
    return blink.to_json()


@app.get("/blinks")
def list_blinks(search: str = "", sort: str = "newest"):
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {SORT_OPTIONS}")
    blinks = filter_and_sort(get_service().list_blinks(), search, sort)
    return {"count": len(blinks), "blinks": [b.to_json() for b in blinks]}


@app.get("/blinks/{blink_id}")
def get_blink(blink_id: str):
    blink = get_service().get(blink_id)
    return {"blink": blink.to_json(), "display": display_info(blink), "markdown": render_detail(blink)}


@app.patch("/blinks/{blink_id}")
def edit_blink(blink_id: str, submission: EditSubmission):
    blink = get_service().edit(blink_id, EditRequest(**submission.model_dump()))
    return blink.to_json()


@app.post("/blinks/{blink_id}/toggle")
def toggle_blink(blink_id: str):
    return get_service().toggle(blink_id).to_json()


@app.delete("/blinks/{blink_id}")
def delete_blink(blink_id: str):
    get_service().delete(blink_id)
    return {"status": "deleted", "id": blink_id}


@app.post("/cleanup")
def cleanup():
    deleted = get_service().cleanup()
    return {"deleted": deleted, "count": len(deleted)}


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the Blinks server"""
    import uvicorn

    cfg = load_config()
    print(f"[Blinks] Starting server on {cfg.server.host}:{cfg.server.port}")
    uvicorn.run(
        "blinks.server:app",
        host=cfg.server.host,
        port=cfg.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
