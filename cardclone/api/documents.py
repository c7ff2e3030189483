"""Knowledge document upload endpoints."""

import asyncio

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel

from cardclone.core.chunking import build_knowledge_chunks
from cardclone.core.config import get_settings
from cardclone.core.file_text import extract_text_from_upload
from cardclone.core.logging import get_logger
from cardclone.db.knowledge import insert_snippets

logger = get_logger(__name__)

router = APIRouter()


class DocumentIngestResponse(BaseModel):
    """Result of ingesting one document."""

    filename: str
    chunks_inserted: int


@router.post("/documents", response_model=DocumentIngestResponse)
async def upload_document(
    file: UploadFile = File(...),  # noqa: B008
) -> DocumentIngestResponse:
    """
    Ingest a document into the knowledge pool: extract text, chunk, tag, store.

    Args:
        file: Uploaded PDF or text-based file

    Returns:
        DocumentIngestResponse with the number of stored chunks

    Raises:
        HTTPException: 400 for unreadable/empty files, 413 for oversized files,
            500 for configuration or storage errors
    """
    filename = file.filename or "unknown"

    try:
        settings = get_settings()
        raw_bytes = await file.read()

        if len(raw_bytes) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_BYTES} bytes.",
            )

        try:
            file_result = extract_text_from_upload(
                filename=filename,
                content_type=file.content_type,
                raw_bytes=raw_bytes,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        chunks = build_knowledge_chunks(
            file_result.text,
            max_chars=settings.CHUNK_MAX_CHARS,
            keywords_per_chunk=settings.KEYWORDS_PER_CHUNK,
        )
        if not chunks:
            raise HTTPException(status_code=400, detail="No text could be extracted from the file.")

        inserted = await asyncio.to_thread(insert_snippets, chunks)

        logger.info(
            f"Ingested document {filename}",
            extra={"extra_data": {"chunks": inserted, "encoding": file_result.detected_encoding}},
        )
        return DocumentIngestResponse(filename=filename, chunks_inserted=inserted)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to ingest document {filename}")
        raise HTTPException(status_code=500, detail="Document ingestion failed") from e
