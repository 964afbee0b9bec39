"""Escape-aware bracket scanning shared by the locator and truncation recovery.

Everything here works on offsets into one text. Delimiters inside string
literals never change depth; a backslash inside a string escapes the next
character.
"""

from dataclasses import dataclass

OPENERS = {"[": "]", "{": "}"}
CLOSERS = frozenset("]}")


@dataclass(frozen=True)
class Boundary:
    """Offset after which the root could be closed with ``open_brackets``."""

    offset: int
    open_brackets: str


@dataclass(frozen=True)
class ScanResult:
    start: int
    end: int
    balanced: bool
    boundaries: tuple[Boundary, ...]


def closing_for(open_brackets: str) -> str:
    return "".join(OPENERS[bracket] for bracket in reversed(open_brackets))


def _only_whitespace_between(text: str, start: int, end: int) -> bool:
    for index in range(start, end):
        if not text[index].isspace():
            return False
    return True


def scan_structure(text: str, start: int) -> ScanResult:
    if start < 0 or start >= len(text) or text[start] not in OPENERS:
        raise ValueError(f"scan must start at an opening bracket, got offset {start}")

    stack: list[str] = []
    boundaries: list[Boundary] = []
    in_string = False
    escaped = False

    def add_boundary(offset: int):
        if boundaries and _only_whitespace_between(text, boundaries[-1].offset, offset):
            return
        boundaries.append(Boundary(offset, "".join(stack)))

    for index in range(start, len(text)):
        ch = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in OPENERS:
            stack.append(ch)
        elif ch in CLOSERS:
            # mismatched closers still pop; malformed input is the parser's problem
            stack.pop()
            if not stack:
                return ScanResult(start, index + 1, True, tuple(boundaries))
            if len(stack) == 1:
                add_boundary(index + 1)
        elif ch == "," and len(stack) == 1:
            add_boundary(index)

    return ScanResult(start, len(text), False, tuple(boundaries))
