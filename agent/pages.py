import io
import os

import requests
from pypdf import PdfReader
from pypdf.errors import PdfReadError

import logger
from generics import TimedLabel, timer

from .settings import DOCUMENT_FETCH_TIMEOUT_SECONDS


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def fetch_document(source: str, timeout_seconds: float = DOCUMENT_FETCH_TIMEOUT_SECONDS) -> bytes:
    source = (source or "").strip()
    if not source:
        raise ValueError("Document source is required.")
    if _is_url(source):
        try:
            res = requests.get(source, timeout=timeout_seconds)
            res.raise_for_status()
        except requests.RequestException as e:
            logger.saveToLog(f"[fetch_document] Failed to download {source}: {e}", "ERROR")
            raise ValueError(f"Failed to fetch document: {e}") from e
        return res.content
    if not os.path.isfile(source):
        raise ValueError(f"Document not found: {source}")
    with open(source, "rb") as file:
        return file.read()


def _page_text(page) -> str:
    text = page.extract_text() or ""
    # one line per page, text items separated by a single space
    return " ".join(text.split())


def extract_page_texts(data: bytes) -> list[str]:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [_page_text(page) for page in reader.pages]
    except (PdfReadError, ValueError, OSError) as e:
        logger.saveToLog(f"[extract_page_texts] Unreadable PDF: {e}", "ERROR")
        raise ValueError(f"Unreadable PDF document: {e}") from e
    if not any(pages):
        raise ValueError("No text found in PDF")
    return pages


def load_page_texts(source: str) -> list[str]:
    with timer(TimedLabel.PAGE_LOAD):
        pages = extract_page_texts(fetch_document(source))
    logger.saveToLog(f"[load_page_texts] Loaded {len(pages)} page(s) from {source}", "INFO")
    return pages
