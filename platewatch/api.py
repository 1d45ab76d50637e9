"""
PlateWatch FastAPI Server

Operator page and JSON endpoints for the detection workflow.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from platewatch import __version__
from platewatch.config import PlateWatchConfig
from platewatch.errors import InvalidImageError, PlateWatchError
from platewatch.operator_page import OPERATOR_HTML
from platewatch.schemas import ImageUpload
from platewatch.session import SessionManager
from platewatch.storage import JsonFileStore
from platewatch.vision.inference_client import InferenceClient


app = FastAPI(
    title="PlateWatch API",
    description="Traffic violation and watchlist plate tracking",
    version=__version__,
)


# Global config and session
_config: Optional[PlateWatchConfig] = None
_session_manager: Optional[SessionManager] = None


def get_config() -> PlateWatchConfig:
    """Get or create global config"""
    global _config
    if _config is None:
        _config = PlateWatchConfig.from_env()
    return _config


def get_session_manager() -> SessionManager:
    """Get or create the operator session"""
    global _session_manager
    if _session_manager is None:
        config = get_config()
        _session_manager = SessionManager(
            storage=JsonFileStore(config.storage_file),
            client=InferenceClient(config),
        )
    return _session_manager


@app.exception_handler(PlateWatchError)
async def platewatch_error_handler(request: Request, exc: PlateWatchError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Request models

class WatchlistRequest(BaseModel):
    """Operator watchlist text, one plate per line"""
    text: str = ""


class ProcessRequest(BaseModel):
    """Optional watchlist override for a process request"""
    watchlist_text: Optional[str] = None


class ClearRequest(BaseModel):
    """Clear-all request; must be explicitly confirmed"""
    confirm: bool = False


# Pages

@app.get("/", response_class=HTMLResponse, tags=["Operator"])
async def operator_page():
    """Operator page: upload, watchlist, results, history and alert log"""
    return HTMLResponse(content=OPERATOR_HTML)


@app.get("/health")
async def health(manager: SessionManager = Depends(get_session_manager)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "inference_available": bool(getattr(manager.client, "is_initialized", True)),
    }


# Session

@app.get("/session", tags=["Session"])
async def get_session(manager: SessionManager = Depends(get_session_manager)):
    """Current session state and both logs"""
    return manager.snapshot().to_dict()


@app.post("/session/image", tags=["Session"])
async def select_image(
    file: UploadFile = File(...),
    manager: SessionManager = Depends(get_session_manager),
    config: PlateWatchConfig = Depends(get_config),
):
    """
    Select the image to process.

    Any image MIME type is accepted. Selecting an image resets the
    previous image's results.
    """
    contents = await file.read()
    if len(contents) > config.max_upload_bytes:
        raise InvalidImageError(
            f"File size too large (max {config.max_upload_bytes // (1024 * 1024)}MB)"
        )

    image = ImageUpload(
        content=contents,
        mime_type=file.content_type or "",
        filename=file.filename or "",
    )
    manager.select_image(image)
    return manager.snapshot().to_dict()


@app.get("/session/image", tags=["Session"])
async def get_preview_image(manager: SessionManager = Depends(get_session_manager)):
    """Raw bytes of the selected image, for the preview"""
    preview = manager.state.preview
    if preview is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No image selected",
        )
    return Response(content=preview.content, media_type=preview.mime_type)


@app.put("/session/watchlist", tags=["Session"])
async def set_watchlist(
    watchlist: WatchlistRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    manager.set_watchlist_text(watchlist.text)
    return manager.snapshot().to_dict()


@app.post("/session/watchlist/clear", tags=["Session"])
async def clear_watchlist(manager: SessionManager = Depends(get_session_manager)):
    """Clear the watchlist text (persisted logs are untouched)"""
    manager.clear_watchlist_input()
    return manager.snapshot().to_dict()


@app.post("/session/process", tags=["Session"])
async def process_image(
    process_request: Optional[ProcessRequest] = None,
    manager: SessionManager = Depends(get_session_manager),
):
    """
    Process the selected image.

    Failures (no image, missing credential) are reported in the
    outcome and in the session error, not as HTTP errors. A request made
    while another image is processing gets 409.
    """
    watchlist_text = process_request.watchlist_text if process_request else None
    outcome = await manager.process_image(watchlist_text)
    return {
        "outcome": outcome.to_dict(),
        "session": manager.snapshot().to_dict(),
    }


@app.post("/session/clear", tags=["Session"])
async def clear_all_data(
    clear_request: ClearRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Permanently delete the detection history and alert log"""
    manager.require_confirmed_clear(clear_request.confirm)
    return manager.snapshot().to_dict()


@app.post("/session/status/dismiss", tags=["Session"])
async def dismiss_status(manager: SessionManager = Depends(get_session_manager)):
    manager.dismiss_status()
    return manager.snapshot().to_dict()


# Logs

@app.get("/history", tags=["Logs"])
async def get_history(manager: SessionManager = Depends(get_session_manager)):
    """Detection history, oldest first"""
    records = manager.history.records
    return {
        "records": [r.to_dict() for r in records],
        "total": len(records),
    }


@app.get("/alerts", tags=["Logs"])
async def get_alerts(manager: SessionManager = Depends(get_session_manager)):
    """Watchlist alert log, in first-match order"""
    plates = manager.alert_log.plates
    return {
        "plates": plates,
        "total": len(plates),
    }


# Main entry point for CLI

def main():
    """Run API server"""
    import uvicorn

    config = get_config()

    print("Starting PlateWatch server...")
    print(f"   Host: {config.api_host}")
    print(f"   Port: {config.api_port}")
    print(f"   Data: {config.storage_file}")

    uvicorn.run(
        "platewatch.api:app",
        host=config.api_host,
        port=config.api_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
