from .llm import run_completion_async
from .pages import load_page_texts
from .prompts import build_prompt
from .structuring import DocumentExtraction, extract_records, structure_pages

__all__ = [
    "DocumentExtraction",
    "build_prompt",
    "extract_records",
    "load_page_texts",
    "run_completion_async",
    "structure_pages",
]
