import logger

from .parsing import strict_loads
from .scanning import closing_for, scan_structure
from .types import Candidate, StructureKind


def recover_partial(text: str, candidate: Candidate):
    """Close a truncated root after its last complete element.

    Array roots are cut after the last complete element, object roots after
    the last complete ``"key": value`` pair. Boundaries are tried newest first;
    nothing partially written is ever kept. Returns the parsed list/dict, or
    None once every boundary has been tried.
    """
    scan = scan_structure(text, candidate.start)
    limit = len(text)
    tried = 0
    for boundary in reversed(scan.boundaries):
        if boundary.offset > limit:
            continue
        tried += 1
        attempt = strict_loads(text[candidate.start:boundary.offset] + closing_for(boundary.open_brackets))
        if attempt.is_container:
            logger.saveToLog(
                f"[recover_partial] closed {candidate.kind.value} root at offset={boundary.offset} "
                f"after {tried} attempt(s)",
                "DEBUG",
            )
            return attempt.value
        if attempt.position is None:
            break
        # every later boundary shares the prefix that failed here
        limit = min(limit, candidate.start + attempt.position)

    if candidate.kind == StructureKind.object:
        logger.saveToLog("[recover_partial] object root could not be closed at any top-level pair", "DEBUG")
    return None
