"""Process an upload batch file by file and assemble the combined response."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Sequence

from file_insights.core.exceptions import (
    BatchTimeoutError,
    FileTooLargeError,
    NoFilesProvidedError,
)
from file_insights.schemas import (
    AnalysisSection,
    BatchError,
    BatchResponse,
    BatchResult,
    ParsedDocument,
    RawUpload,
)
from file_insights.services.file_parser import parse_document
from file_insights.services.section_analytics import SectionAnalytics

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024

FILE_SECTION = AnalysisSection(
    title="File Analysis",
    primary_metrics=("Data Overview", "Key Metrics"),
    deep_metrics=("Statistical Analysis", "Data Distribution"),
)


class BatchProcessor:
    """Parse and analyze uploads one at a time under an outer deadline.

    ``analytics_factory`` is called once per file so no model client or
    analyzer state is shared between files.
    """

    def __init__(
        self,
        analytics_factory: Callable[[], SectionAnalytics],
        *,
        max_file_size: int = MAX_FILE_SIZE_BYTES,
        batch_timeout: float = 58.0,
        parser: Callable[[str, bytes], ParsedDocument] = parse_document,
        section: AnalysisSection = FILE_SECTION,
    ) -> None:
        self._analytics_factory = analytics_factory
        self._max_file_size = max_file_size
        self._batch_timeout = batch_timeout
        self._parser = parser
        self._section = section

    def validate(self, uploads: Sequence[RawUpload]) -> None:
        """Reject the whole batch before any file is touched."""
        if not uploads:
            raise NoFilesProvidedError()
        for upload in uploads:
            if upload.size > self._max_file_size:
                raise FileTooLargeError(
                    upload.filename, upload.size, self._max_file_size
                )

    async def process(self, uploads: Sequence[RawUpload]) -> BatchResponse:
        self.validate(uploads)
        logger.info("Processing batch of %d file(s)", len(uploads))
        try:
            response = await asyncio.wait_for(
                self._process_sequentially(uploads), timeout=self._batch_timeout
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Batch of %d file(s) exceeded %gs", len(uploads), self._batch_timeout
            )
            raise BatchTimeoutError("Request timeout") from exc
        logger.info(
            "Batch complete: %d succeeded, %d failed",
            response.successful_files,
            response.failed_files,
        )
        return response

    async def _process_sequentially(self, uploads: Sequence[RawUpload]) -> BatchResponse:
        results: List[BatchResult] = []
        errors: List[BatchError] = []

        for upload in uploads:
            try:
                results.append(await self._process_file(upload))
            except Exception as exc:
                logger.exception("Error processing %s", upload.filename)
                errors.append(
                    BatchError(filename=upload.filename, error=str(exc) or type(exc).__name__)
                )

        return BatchResponse(
            success=True,
            results=results,
            errors=errors,
            total_files=len(uploads),
            successful_files=len(results),
            failed_files=len(errors),
        )

    async def _process_file(self, upload: RawUpload) -> BatchResult:
        document = await asyncio.to_thread(
            self._parser, upload.filename, upload.content
        )
        analytics = self._analytics_factory()
        outcome = await analytics.run(document, self._section)
        return BatchResult(
            filename=upload.filename,
            processed_data=document,
            analytics=outcome,
        )


__all__ = ["BatchProcessor", "FILE_SECTION", "MAX_FILE_SIZE_BYTES"]
