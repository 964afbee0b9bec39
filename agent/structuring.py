from dataclasses import dataclass, field

import logger
from config import get_settings
from extraction import ErrorKind, Failed, Recovered, extract_structured
from generics import TimedLabel, timer

from .llm import run_completion_async
from .prompts import SYSTEM_PROMPT, build_prompt
from .settings import DEFAULT_MODEL, MAX_EXTRACTION_RETRIES

# failures a shorter, fresh completion can plausibly fix
RETRYABLE_FAILURES = frozenset({ErrorKind.unbalanced_unrecoverable, ErrorKind.strict_parse_error})


@dataclass
class ChunkReport:
    first_page: int
    last_page: int
    status: str
    attempts: int
    record_count: int = 0
    warnings: list[str] = field(default_factory=list)
    error: dict | None = None

    def to_dict(self) -> dict:
        return {
            "pages": [self.first_page, self.last_page],
            "status": self.status,
            "attempts": self.attempts,
            "record_count": self.record_count,
            "warnings": self.warnings,
            "error": self.error,
        }


@dataclass
class DocumentExtraction:
    records: list = field(default_factory=list)
    chunks: list[ChunkReport] = field(default_factory=list)

    @property
    def failed_chunks(self) -> int:
        return sum(1 for chunk in self.chunks if chunk.status == "failed")

    @property
    def may_be_incomplete(self) -> bool:
        return any(chunk.status != "complete" for chunk in self.chunks)


def extract_records(payload) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("data", "rows", "records", "items", "results"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
        return [payload]
    return []


def chunk_pages(page_texts: list[str], pages_per_request: int) -> list[tuple[int, list[str]]]:
    size = max(1, pages_per_request)
    return [(index, page_texts[index:index + size]) for index in range(0, len(page_texts), size)]


async def structure_chunk(
    page_texts: list[str],
    *,
    first_page: int,
    model: str = DEFAULT_MODEL,
    max_retries: int = MAX_EXTRACTION_RETRIES,
) -> tuple[list, ChunkReport]:
    last_page = first_page + len(page_texts) - 1
    excerpt_chars = get_settings().excerpt_chars
    result = None
    attempts = 0
    for attempt in range(max_retries + 1):
        attempts = attempt + 1
        raw = await run_completion_async(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_prompt(page_texts, retry=attempt > 0),
            model=model,
        )
        # every retry runs the engine fresh on the new completion
        result = extract_structured(raw, excerpt_chars=excerpt_chars)
        if not isinstance(result, Failed):
            break
        logger.saveToLog(
            f"[structure_chunk] pages={first_page}-{last_page} attempt={attempt + 1}/{max_retries + 1} "
            f"failed kind={result.diagnostic.kind.value}: {result.diagnostic.message}",
            "WARNING",
        )
        if result.diagnostic.kind not in RETRYABLE_FAILURES:
            break

    if isinstance(result, Failed):
        return [], ChunkReport(
            first_page=first_page,
            last_page=last_page,
            status=result.status,
            attempts=attempts,
            error=result.diagnostic.to_dict(),
        )

    records = extract_records(result.value)
    warnings = [warning.value for warning in result.warnings] if isinstance(result, Recovered) else []
    if warnings:
        logger.saveToLog(
            f"[structure_chunk] pages={first_page}-{last_page} recovered with warnings={warnings}; data may be incomplete",
            "WARNING",
        )
    return records, ChunkReport(
        first_page=first_page,
        last_page=last_page,
        status=result.status,
        attempts=attempts,
        record_count=len(records),
        warnings=warnings,
    )


async def structure_pages(
    page_texts: list[str],
    *,
    model: str | None = None,
    pages_per_request: int | None = None,
    max_retries: int = MAX_EXTRACTION_RETRIES,
) -> DocumentExtraction:
    if not page_texts:
        raise ValueError("No page text to structure.")
    pages_per_request = pages_per_request or get_settings().pages_per_request
    extraction = DocumentExtraction()
    with timer(TimedLabel.DOCUMENT_RUN):
        # chunks run one after another so retries stay sequential per request
        for first_index, chunk in chunk_pages(page_texts, pages_per_request):
            if not any(text.strip() for text in chunk):
                continue
            records, report = await structure_chunk(
                chunk,
                first_page=first_index + 1,
                model=model or DEFAULT_MODEL,
                max_retries=max_retries,
            )
            extraction.records.extend(records)
            extraction.chunks.append(report)
    logger.saveToLog(
        f"[structure_pages] records={len(extraction.records)} chunks={len(extraction.chunks)} "
        f"failed_chunks={extraction.failed_chunks}",
        "INFO",
    )
    return extraction
