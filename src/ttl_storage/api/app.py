"""FastAPI edge for the TTL storage service."""

import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ttl_storage.automation.reaper import Reaper
from ttl_storage.config.settings import Settings, settings
from ttl_storage.core.errors import InvalidTTLError, SnapshotError
from ttl_storage.core.formatter import format_reading
from ttl_storage.core.logging import get_logger, setup_logging
from ttl_storage.core.metrics import metrics
from ttl_storage.core.middleware import ObservabilityMiddleware
from ttl_storage.core.schemas import LoadResult, RecordSchema, records_to_wire
from ttl_storage.storage.snapshot import SnapshotCodec
from ttl_storage.storage.store import Store

setup_logging(settings.server.log_level)
logger = get_logger(__name__)

router = APIRouter(prefix="/api/storage", tags=["storage"])


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_codec(request: Request) -> SnapshotCodec:
    return request.app.state.snapshots


@router.get("/{key}", response_class=PlainTextResponse)
def get_one(key: str, store: Store = Depends(get_store)) -> Response:
    """Value and remaining lifetime for a live key."""
    logger.debug(f"Fetching key={key!r}")
    reading = store.get(key)
    if reading is None:
        return PlainTextResponse(f"Запись для ключа '{key}' не найдена", status_code=404)
    return PlainTextResponse(format_reading(reading))


@router.get("")
def list_all(store: Store = Depends(get_store)) -> Response:
    """All live records keyed by name; 204 when there are none."""
    try:
        records = store.get_all()
    except Exception as e:
        logger.error(f"Failed to list records: {e}", exc_info=True)
        return JSONResponse({}, status_code=500)
    if not records:
        return Response(status_code=204)
    return JSONResponse(records_to_wire(records))


@router.post("", status_code=201, response_class=PlainTextResponse)
def set_value(
    key: str = Query(...),
    value: str = Query(...),
    ttl: Optional[str] = Query(None, description="TTL in milliseconds, must be > 100"),
    store: Store = Depends(get_store),
) -> Response:
    """Store value under key for ttl milliseconds (10 s when omitted)."""
    try:
        store.set(key, value, ttl)
    except InvalidTTLError as e:
        logger.warning(f"Rejected set for key={key!r}: {e}")
        return PlainTextResponse(
            f"Ошибка при сохранении значения {value} по ключу: {key} {e}",
            status_code=400,
        )
    except Exception as e:
        logger.error(f"Failed to store key={key!r}: {e}", exc_info=True)
        return PlainTextResponse("Internal Server Error", status_code=500)
    return PlainTextResponse("Запись успешно добавлена", status_code=201)


@router.delete("/{key}")
def remove(key: str, store: Store = Depends(get_store)) -> Response:
    """Delete key and return the record it held."""
    record = store.remove(key)
    if record is None:
        return Response(status_code=404)
    return JSONResponse(RecordSchema.from_record(record).model_dump())


@router.post("/dump")
def dump(
    request: Request,
    store: Store = Depends(get_store),
    codec: SnapshotCodec = Depends(get_codec),
) -> Response:
    """Write a snapshot and return it as a download."""
    with request.app.state.snapshot_lock:
        try:
            path = codec.dump(store)
            content = path.read_bytes()
        except (SnapshotError, OSError) as e:
            return JSONResponse({"detail": str(e)}, status_code=500)
    return Response(
        content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{path.name}"'},
    )


@router.post("/load")
def load(
    request: Request,
    store: Store = Depends(get_store),
    codec: SnapshotCodec = Depends(get_codec),
) -> Response:
    """Replace the store with the last snapshot."""
    with request.app.state.snapshot_lock:
        try:
            count = codec.load(store)
        except SnapshotError as e:
            return JSONResponse({"detail": str(e)}, status_code=500)
    return JSONResponse(LoadResult(records=count).model_dump())


def create_app(config: Settings = settings, store: Optional[Store] = None) -> FastAPI:
    """Build the app; the store and reaper live for the lifespan of the app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = store if store is not None else Store(default_ttl_ms=config.storage.default_ttl_ms)
        reaper = Reaper(
            storage,
            period_ms=config.storage.reaper_period_ms,
            initial_delay_ms=config.storage.reaper_initial_delay_ms,
        )
        app.state.store = storage
        app.state.snapshots = SnapshotCodec(config.storage.snapshot_path)
        app.state.snapshot_lock = threading.Lock()
        app.state.reaper = reaper
        reaper.start()
        try:
            yield
        finally:
            reaper.stop()

    app = FastAPI(title="TTL Storage", version="1.0.0", lifespan=lifespan)
    app.add_middleware(ObservabilityMiddleware)
    app.include_router(router)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> PlainTextResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse({"status": "ok", "service": "ttl-storage"})

    @app.get("/metrics")
    async def get_metrics() -> JSONResponse:
        """Metrics endpoint."""
        return JSONResponse(metrics.snapshot())

    return app


app = create_app()
