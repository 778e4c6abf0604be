"""
Upload / process / download endpoints.
"""
import asyncio
import io
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse

from photolab.config import logger
from photolab.models import AdjustmentParameters
from photolab.schemas import ErrorResponse, ProcessRequest, ProcessResponse, UploadResponse

router = APIRouter(tags=["images"])

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 404, 415, 422, 500)
}

async def _run(request: Request, fn, *args):
    state = request.app.state
    async with state.semaphore:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(state.executor, fn, *args)

def _params(body: ProcessRequest) -> AdjustmentParameters:
    return AdjustmentParameters.parse(
        brightness=body.brightness,
        saturation=body.saturation,
        contrast=body.contrast,
        rotation=body.rotation,
        format=body.format,
    )

@router.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload(request: Request, image: Optional[UploadFile] = File(None),
                 format: Optional[str] = Form(None)):
    """Analyze an uploaded image, store the original and return a preview."""
    if image is None:
        raise HTTPException(status_code=400, detail="No image provided")
    raw = await image.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(raw) > request.app.state.settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")

    metrics, preview = await _run(request, request.app.state.processor.analyze, raw, format)
    handle = await _run(request, request.app.state.storage.save, raw)
    await _run(request, request.app.state.storage.purge, request.app.state.settings.UPLOAD_TTL_SECONDS)
    logger.info("[upload] %s -> %s %s", image.filename, handle, metrics.as_dict())

    return UploadResponse(
        message="Image uploaded successfully",
        preview=preview.to_data_uri(),
        handle=handle,
        **metrics.as_dict(),
    )

@router.post("/process", response_model=ProcessResponse, responses=ERROR_RESPONSES)
async def process(request: Request, body: ProcessRequest):
    """Apply adjustments to a stored original and return it as a data URI."""
    params = _params(body)
    raw = await _run(request, request.app.state.storage.load, body.handle)
    encoded = await _run(request, request.app.state.processor.render, raw, params)
    uri = encoded.to_data_uri()
    return ProcessResponse(
        processedImage=uri,
        preview=uri,
        brightness=params.brightness,
        contrast=params.contrast,
        saturation=params.saturation,
        rotation=params.rotation,
        format=encoded.format,
        handle=body.handle,
    )

@router.post("/download", responses=ERROR_RESPONSES)
async def download(request: Request, body: ProcessRequest):
    params = _params(body)
    raw = await _run(request, request.app.state.storage.load, body.handle)
    encoded = await _run(request, request.app.state.processor.render, raw, params)
    logger.info("[download] %s as %s (%d bytes)", body.handle, encoded.format, len(encoded.data))
    return StreamingResponse(
        io.BytesIO(encoded.data),
        media_type=encoded.mime_type,
        headers={"Content-Disposition": f"attachment; filename=processed.{encoded.format}"},
    )
