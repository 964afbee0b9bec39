import asyncio

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

import logger
from agent import load_page_texts, structure_pages
from agent.structuring import extract_records
from config import get_settings
from extraction import Failed, Recovered, extract_json
from generics import response_builder
from routes.extraction_models import DocumentRequest, ParseRequest
from services.export_service import records_to_csv, write_export_files

extract_router = APIRouter(prefix="/extract", tags=["extract"])


@extract_router.post("/parse")
def parse_completion(body: ParseRequest):
    result = extract_json(body.text, body.finish_reason, excerpt_chars=get_settings().excerpt_chars)
    if isinstance(result, Failed):
        logger.saveToLog(
            f"[parse_completion] Extraction failed kind={result.diagnostic.kind.value}: {result.diagnostic.message}",
            "WARNING",
        )
        return response_builder(
            success=False,
            message=f"Could not extract JSON: {result.diagnostic.kind.value}",
            statusCode=422,
            data=result.to_dict(),
        )
    message = "Extracted JSON"
    if isinstance(result, Recovered):
        message = "Recovered JSON; data may be incomplete"
    count = len(result.value) if isinstance(result.value, (list, dict)) else None
    return response_builder(success=True, message=message, count=count, data=result.to_dict())


@extract_router.post("/csv")
def parse_completion_to_csv(body: ParseRequest):
    result = extract_json(body.text, body.finish_reason, excerpt_chars=get_settings().excerpt_chars)
    if isinstance(result, Failed):
        return response_builder(
            success=False,
            message=f"Could not extract JSON: {result.diagnostic.kind.value}",
            statusCode=422,
            data=result.to_dict(),
        )
    records = extract_records(result.value)
    if not records:
        return response_builder(success=False, message="No records found", statusCode=404)
    headers = {}
    if isinstance(result, Recovered):
        headers["X-Recovery-Warnings"] = ",".join(warning.value for warning in result.warnings)
    return PlainTextResponse(records_to_csv(records), media_type="text/csv", headers=headers)


@extract_router.post("/document")
async def structure_document(body: DocumentRequest):
    try:
        page_texts = await asyncio.to_thread(load_page_texts, body.source)
        extraction = await structure_pages(
            page_texts,
            model=body.model,
            pages_per_request=body.pages_per_request,
            max_retries=body.max_retries,
        )
    except ValueError as e:
        logger.saveToLog(f"[structure_document] Validation failed: {e}", "ERROR")
        return response_builder(success=False, message=str(e), statusCode=400)
    except Exception as e:
        logger.saveToLog(f"[structure_document] Unexpected structuring error: {e}", "ERROR")
        return response_builder(
            success=False,
            message="An unexpected error occurred while structuring the document.",
            statusCode=500,
        )

    exports = None
    if body.write_exports and extraction.records:
        json_path, csv_path = write_export_files(extraction.records)
        exports = {"json": json_path, "csv": csv_path}

    message = "Document structured"
    if extraction.may_be_incomplete:
        message = "Document structured; data may be incomplete"
    return response_builder(
        success=bool(extraction.records),
        message=message,
        count=len(extraction.records),
        errors=extraction.failed_chunks,
        statusCode=200 if extraction.records else 422,
        data={
            "records": extraction.records,
            "chunks": [chunk.to_dict() for chunk in extraction.chunks],
            "exports": exports,
        },
    )
