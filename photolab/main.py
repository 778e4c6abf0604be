import asyncio
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from photolab.api.v1.images import router as images_router
from photolab.config import Settings, logger
from photolab.errors import PhotolabError
from photolab.services.image_processor import ImageProcessor
from photolab.services.storage import TempStorage
from photolab.utils.paths import ensure_dirs

def create_app(settings: Settings) -> FastAPI:
    """Build the service around an explicit settings object."""
    workers = max(1, settings.PROCESS_MAX_CONCURRENCY)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.executor = ThreadPoolExecutor(max_workers=workers)
        app.state.semaphore = asyncio.Semaphore(workers)
        app.state.storage.purge(settings.UPLOAD_TTL_SECONDS)
        logger.info("[startup] %s with %d workers, uploads in %s", settings.APP_NAME, workers, settings.UPLOAD_DIR)
        yield
        app.state.executor.shutdown(wait=True)
        logger.info("[shutdown] executor stopped")

    ensure_dirs(settings)
    app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = TempStorage(settings.UPLOAD_DIR)
    app.state.processor = ImageProcessor(
        default_format=settings.DEFAULT_FORMAT,
        preview_max_width=settings.PREVIEW_MAX_WIDTH,
        quality=settings.JPEG_QUALITY,
        max_pixels=settings.MAX_PIXELS,
    )

    app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(PhotolabError)
    async def photolab_error(request: Request, exc: PhotolabError):
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", request.url.path, exc.code, exc)
        else:
            logger.warning("[%s] %s: %s", request.url.path, exc.code, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "message": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(images_router)
    # last, so API routes win over files of the same name
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
    return app
