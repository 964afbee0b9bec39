import enum
import time
import uuid
from contextlib import contextmanager

from fastapi.responses import JSONResponse

import logger


def valid_http(statusCode):
    if not isinstance(statusCode, int):
        return False
    return statusCode > 100 and statusCode <= 599


def response_builder(
    *,
    success: bool,
    message: str,
    count: int | None = None,
    errors: int | None = None,
    statusCode: int = 200,
    data: dict | None = None
):
    status = statusCode
    if not (valid_http(statusCode)):
        status = 500

    return JSONResponse(
        {"success": success, "message": message, "amount": count, "errors": errors, "data": data},
        status_code=status,
    )


class TimedLabel(enum.Enum):
    CHAT_COMPLETION = "chat_completion"
    PAGE_LOAD = "page_load"
    DOCUMENT_RUN = "document_run"


@contextmanager
def timer(label: TimedLabel):
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        saveTime(label.value, elapsed)


def saveTime(label: str, seconds: float):
    logger.saveToLog(f"[timer] {label} took {seconds:.3f}s", "INFO")


def new_run_id() -> str:
    return str(uuid.uuid4())
