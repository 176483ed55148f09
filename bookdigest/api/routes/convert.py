# bookdigest/api/routes/convert.py
"""E-book conversion endpoint."""

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from bookdigest.api.error_handlers import handle_api_errors
from bookdigest.api.models.schemas import ConvertResponse
from bookdigest.ingestion.epub import convert_epub
from bookdigest.logging.logger import get_logger
from bookdigest.logging.tags import API

logger = get_logger(__name__)

router = APIRouter(tags=["convert"])

MAX_UPLOAD_BYTES = 10 << 20  # 10 MB


@router.post("/convertEpubToChapters", response_model=ConvertResponse)
@handle_api_errors
async def convert_epub_to_chapters(file: UploadFile = File(...)) -> ConvertResponse:
    """
    Split an uploaded EPUB into chapter texts and its table of contents.

    Only .epub uploads up to 10 MB are accepted.
    """
    filename = file.filename or ""
    if not filename.lower().endswith(".epub"):
        raise HTTPException(
            status_code=400, detail="Invalid file type, only .epub files are allowed"
        )

    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File too large")

    logger.info(f"{API} Converting {filename} ({len(data)} bytes)")
    document = await run_in_threadpool(convert_epub, data)
    return ConvertResponse(chapters=document.chapters, toc=document.toc)
