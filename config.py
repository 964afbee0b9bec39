import os
from dataclasses import dataclass
from functools import lru_cache


def require_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not str(value).strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_int(value: str | None, default: int, *, minimum: int = 1) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return max(minimum, parsed)


@dataclass(frozen=True)
class AppSettings:
    server_url: str
    log_file: str
    log_level: str
    log_to_stdout: bool
    export_artifact_dir: str
    excerpt_chars: int
    pages_per_request: int


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings(
        server_url=os.getenv("SERVER_URL", "http://localhost:8000"),
        log_file=os.getenv("LOG_FILE", "logs/log.txt"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_to_stdout=_as_bool(os.getenv("LOG_TO_STDOUT"), True),
        export_artifact_dir=os.getenv("EXPORT_ARTIFACT_DIR", os.path.join(os.getcwd(), "exports")),
        excerpt_chars=_as_int(os.getenv("EXCERPT_CHARS"), 300),
        pages_per_request=_as_int(os.getenv("PAGES_PER_REQUEST"), 1),
    )
