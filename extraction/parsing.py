import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ParseAttempt:
    ok: bool
    value: Any = None
    error: str | None = None
    position: int | None = None
    syntax_error: bool = False

    @property
    def is_container(self) -> bool:
        return self.ok and isinstance(self.value, (list, dict))


class _RejectedConstant(ValueError):
    def __init__(self, name: str):
        super().__init__(f"Invalid JSON constant {name}")
        self.name = name


def _reject_constant(name: str):
    raise _RejectedConstant(name)


def _constant_position(text: str, name: str) -> int | None:
    """Offset of the first `name` outside a string literal."""
    in_string = False
    escaped = False
    for index, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == name[0] and text.startswith(name, index):
            return index
    return None


def strict_loads(text: str) -> ParseAttempt:
    # NaN, Infinity and -Infinity are not JSON even though the decoder accepts them
    try:
        return ParseAttempt(ok=True, value=json.loads(text, parse_constant=_reject_constant))
    except json.JSONDecodeError as e:
        return ParseAttempt(ok=False, error=e.msg, position=e.pos, syntax_error=True)
    except _RejectedConstant as e:
        return ParseAttempt(
            ok=False,
            error=str(e),
            position=_constant_position(text, e.name),
            syntax_error=True,
        )
    except (RecursionError, ValueError, TypeError) as e:
        # deeply nested input or values the decoder refuses to build
        return ParseAttempt(ok=False, error=str(e) or type(e).__name__)
