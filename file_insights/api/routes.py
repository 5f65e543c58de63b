"""
FastAPI routes for the file insights service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from file_insights.core.exceptions import BatchRejectedError, BatchTimeoutError
from file_insights.dependencies import get_app_settings, get_batch_processor
from file_insights.schemas import BatchResponse, ErrorResponse, RawUpload

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(
    settings: Annotated[Any, Depends(get_app_settings)],
) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.post(
    "/file-process",
    response_model=BatchResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_files(
    processor: Annotated[Any, Depends(get_batch_processor)],
    files: Annotated[
        Optional[List[UploadFile]],
        File(description="Spreadsheets, CSV or PDF documents to analyze."),
    ] = None,
) -> Any:
    """Parse each uploaded file and attach model-generated insights."""
    uploads = [await _read_upload(upload) for upload in files or []]

    try:
        return await processor.process(uploads)
    except BatchRejectedError as exc:
        return _error_response(HTTPStatus.BAD_REQUEST, str(exc))
    except BatchTimeoutError as exc:
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
    except Exception as exc:  # pragma: no cover - unexpected failure
        logger.exception("Processing error")
        return _error_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            str(exc) or "Unknown error occurred",
        )


async def _read_upload(upload: UploadFile) -> RawUpload:
    content = await upload.read()
    size = upload.size if upload.size is not None else len(content)
    return RawUpload(filename=upload.filename or "", content=content, size=size)


def _error_response(status_code: HTTPStatus, message: str) -> JSONResponse:
    payload = ErrorResponse(error=message)
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True),
    )


__all__ = ["router"]
