"""
HTTP API for the mini app

Routes wrap every payload as ``{"success": true, "data": ...}`` or
``{"success": false, "error": ...}``. Uploaded images are only checked and
measured; nothing about them reaches the engine.
"""
import asyncio
import io
import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import numpy as np
from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from PIL import Image, UnidentifiedImageError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bettingai.config import Settings
from bettingai.engine import MAX_BATCH_SIZE, MIN_BATCH_SIZE, PredictionEngine
from bettingai.exceptions import PredictionError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|webp")
ALLOWED_FORMATS = {"JPEG", "PNG", "GIF", "WEBP"}
DEFAULT_BATCH_COUNT = 3
STATIC_DIR = os.path.join(os.path.dirname(__file__), "webapp")


class UploadRejected(Exception):
    """Raised when an uploaded file is not an acceptable image"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


def parse_count(raw: Optional[str]) -> int:
    """Batch size from a query value: 3 when missing or not a number, clamped to [1, 10]"""
    try:
        count = int(raw) if raw is not None else DEFAULT_BATCH_COUNT
    except ValueError:
        count = DEFAULT_BATCH_COUNT
    return max(MIN_BATCH_SIZE, min(count, MAX_BATCH_SIZE))


def inspect_image(filename: str, content_type: str, data: bytes,
                  max_bytes: int) -> Dict[str, Any]:
    """
    Validate an uploaded image

    Args:
        filename: Client file name
        content_type: Client MIME type
        data: File content, read with at most ``max_bytes + 1`` bytes
        max_bytes: Size limit

    Returns:
        Image info dict for the response

    Raises:
        UploadRejected: wrong type, too large or not decodable
    """
    ext = os.path.splitext(filename)[1].lower()
    if not (ALLOWED_TYPES.search(ext) and ALLOWED_TYPES.search(content_type or "")):
        raise UploadRejected("Only images are supported (JPEG, PNG, GIF, WebP)")
    if len(data) > max_bytes:
        raise UploadRejected(f"File is larger than {max_bytes} bytes")

    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise UploadRejected("File is not a readable image") from e
    if image_format not in ALLOWED_FORMATS:
        raise UploadRejected(f"Unsupported image format {image_format}")

    return {
        "filename": filename,
        "size": len(data),
        "mimetype": content_type,
        "width": width,
        "height": height,
    }


def create_web_app(engine: Optional[PredictionEngine] = None,
                   settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application

    All routes are coroutines on one event loop, so they share one engine.

    Args:
        engine: Prediction engine (default: seeded from ``settings.seed``)
        settings: Service settings (default: Settings())
    """
    settings = settings if settings is not None else Settings()
    engine = engine if engine is not None else PredictionEngine(seed=settings.seed)
    delay_rng = np.random.default_rng()
    started = time.monotonic()
    counters = {"predictions": 0}

    app = FastAPI(title="Betting AI")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.middleware("http")
    async def no_cache(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(UploadRejected)
    async def upload_error(request: Request, exc: UploadRejected):
        logger.warning("Upload rejected: %s", exc)
        return _error(400, "File upload error", str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        logger.warning("Invalid request to %s: %s", request.url.path, problems)
        if any(err["loc"] and err["loc"][0] == "body" for err in exc.errors()):
            return _error(400, "File upload error", problems)
        return _error(400, "Invalid request", problems)

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(500, "Internal server error",
                      str(exc) if settings.is_development else None)

    @app.get("/", response_class=HTMLResponse)
    async def root():
        with open(os.path.join(STATIC_DIR, "index.html"), "r", encoding="utf-8") as f:
            return f.read()

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "timestamp": _now(), "uptime": time.monotonic() - started}

    @app.post("/api/analyze")
    async def analyze(image: Optional[UploadFile] = File(None)):
        image_info = None
        if image is not None and image.filename:
            data = await image.read(settings.max_upload_bytes + 1)
            image_info = inspect_image(image.filename, image.content_type,
                                       data, settings.max_upload_bytes)
            logger.info("Received image: %s (%d bytes)", image.filename, image_info["size"])
        else:
            logger.info("Received analyze request without image")

        delay = float(delay_rng.uniform(settings.analyze_delay_min, settings.analyze_delay_max))
        await asyncio.sleep(delay)

        try:
            prediction = engine.generate()
        except PredictionError as e:
            logger.exception("Prediction failed during analysis")
            return _error(500, "Error processing image", str(e))

        counters["predictions"] += 1
        logger.info("Prediction generated: %s", prediction.bet_type)
        data = prediction.to_dict()
        if image_info is not None:
            data["imageInfo"] = image_info
        return {"success": True, "data": data}

    @app.get("/api/quick-predict")
    async def quick_predict():
        try:
            prediction = engine.generate()
        except PredictionError:
            logger.exception("Quick prediction failed")
            return _error(500, "Prediction generation error")

        counters["predictions"] += 1
        return {"success": True, "data": prediction.to_dict()}

    @app.get("/api/multiple-predictions")
    async def multiple_predictions(count: Optional[str] = None):
        try:
            predictions = engine.generate_multiple(parse_count(count))
        except PredictionError:
            logger.exception("Batch prediction failed")
            return _error(500, "Predictions generation error")

        counters["predictions"] += len(predictions)
        return {
            "success": True,
            "count": len(predictions),
            "data": [prediction.to_dict() for prediction in predictions],
        }

    @app.get("/api/stats")
    async def stats():
        return {
            "success": True,
            "data": {
                "uptime": time.monotonic() - started,
                "predictionsServed": counters["predictions"],
                "catalogVersion": engine.catalog.version,
                "timestamp": _now(),
            },
        }

    return app


async def serve(app: FastAPI, settings: Settings) -> None:
    """Run the app with uvicorn inside the current event loop"""
    import uvicorn

    config = uvicorn.Config(app, host=settings.host, port=settings.port,
                            log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    await server.serve()
