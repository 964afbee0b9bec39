import re

_LEADING_PREFIX = re.compile(
    r"(?:json\b[ \t]*:?[ \t]*\n?[ \t]*)?"
    r"(?:here[ \t]+(?:is|are)[ \t]+the[ \t]+(?:json|data|result|output)[ \t]*:)?",
    flags=re.IGNORECASE,
)
_FENCE_LANG_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+-.")


def _remove_bold_spans(text: str) -> str:
    parts: list[str] = []
    cursor = 0
    while True:
        open_at = text.find("**", cursor)
        if open_at == -1:
            break
        line_end = text.find("\n", open_at)
        if line_end == -1:
            line_end = len(text)
        close_at = text.find("**", open_at + 2, line_end)
        if close_at == -1:
            parts.append(text[cursor:line_end])
            cursor = line_end
            continue
        parts.append(text[cursor:open_at])
        cursor = close_at + 2
    parts.append(text[cursor:])
    return "".join(parts)


def _is_fence_line(line: str) -> bool:
    stripped = line.strip()
    if not stripped.startswith("```"):
        return False
    return all(ch in _FENCE_LANG_CHARS for ch in stripped[3:])


def _drop_fence_lines(text: str) -> str:
    lines = text.split("\n")
    kept = [line for line in lines if not _is_fence_line(line)]
    if len(kept) == len(lines):
        return text
    return "\n".join(kept)


def _strip_leading_noise(text: str) -> str:
    """Skip lead-in tokens and fence lines at the head in one forward scan."""
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos].isspace():
            pos += 1
        match = _LEADING_PREFIX.match(text, pos)
        if match and match.end() > pos:
            pos = match.end()
            continue
        line_end = text.find("\n", pos)
        if line_end == -1:
            line_end = length
        if pos < length and _is_fence_line(text[pos:line_end]):
            pos = line_end
            continue
        return text[pos:]


def _normalize_once(text: str) -> str:
    cleaned = _remove_bold_spans(text)
    cleaned = _drop_fence_lines(cleaned)
    return _strip_leading_noise(cleaned).strip()


def normalize_text(raw: str) -> str:
    """Strip markdown fencing, emphasis and a conversational lead-in.

    Every step only removes characters, so repeating the pass until nothing
    changes terminates and makes the result a fixed point.
    """
    current = raw or ""
    while True:
        cleaned = _normalize_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned
