from .scanning import scan_structure
from .types import Candidate, StructureKind

_ROOT_OPENERS = (("[", StructureKind.array), ("{", StructureKind.object))


def _candidate_from(text: str, start: int, kind: StructureKind) -> Candidate:
    scan = scan_structure(text, start)
    return Candidate(start=start, end=scan.end, kind=kind, balanced=scan.balanced)


def locate_structure(text: str) -> Candidate | None:
    """Return the presumed JSON root: the first array, else the first object."""
    for opener, kind in _ROOT_OPENERS:
        start = text.find(opener)
        if start != -1:
            return _candidate_from(text, start, kind)
    return None


def locate_candidates(text: str) -> list[Candidate]:
    """Candidates worth a strict parse, outermost first.

    The first array is the root unless an object opened before it is still
    open where the array starts, in which case the enclosing object comes first.
    """
    primary = locate_structure(text)
    if primary is None:
        return []
    if primary.kind == StructureKind.array:
        object_start = text.find("{", 0, primary.start)
        if object_start != -1:
            enclosing = _candidate_from(text, object_start, StructureKind.object)
            if enclosing.end > primary.start:
                return [enclosing, primary]
    return [primary]
