"""Apply many replacements to a text buffer in one pass."""

from collections.abc import Iterable, Iterator

from .models import Edit


def _validated(edits: Iterable[Edit], length: int | None = None) -> list[Edit]:
    """Check that edits are ascending, non-overlapping and inside the buffer."""
    ordered = list(edits)
    previous_end = 0
    for edit in ordered:
        if edit.start > edit.end:
            raise ValueError(f"Edit range [{edit.start}, {edit.end}) is reversed")
        if edit.start < previous_end:
            raise ValueError(
                f"Edit range [{edit.start}, {edit.end}) overlaps or precedes the previous edit ending at {previous_end}"
            )
        if length is not None and edit.end > length:
            raise ValueError(f"Edit range [{edit.start}, {edit.end}) exceeds buffer length {length}")
        previous_end = edit.end
    return ordered


def shifted_spans(edits: Iterable[Edit]) -> Iterator[tuple[int, int]]:
    """Yield where each replacement lands once every earlier edit is applied.

    Each edit is shifted by the running sum of the length changes of the
    edits before it.
    """
    offset = 0
    for edit in _validated(edits):
        start = edit.start + offset
        yield start, start + len(edit.replacement)
        offset += edit.delta


def apply_all(buffer: str, edits: Iterable[Edit]) -> str:
    """Apply ascending, non-overlapping edits given in original coordinates.

    Args:
        buffer: Original text
        edits: Edits sorted by start offset

    Returns:
        The rewritten text

    Raises:
        ValueError: If edits are unsorted, overlap or fall outside the buffer
    """
    pieces: list[str] = []
    cursor = 0
    for edit in _validated(edits, len(buffer)):
        # untouched text between edits is copied once, so earlier length
        # changes shift later replacements exactly as in shifted_spans()
        pieces.append(buffer[cursor : edit.start])
        pieces.append(edit.replacement)
        cursor = edit.end
    pieces.append(buffer[cursor:])
    return "".join(pieces)


def drop_overlapping(edits: Iterable[Edit]) -> list[Edit]:
    """Sort edits by position, keeping the first of any overlapping group."""
    kept: list[Edit] = []
    for edit in sorted(edits, key=lambda edit: (edit.start, edit.end)):
        if kept and edit.start < kept[-1].end:
            continue
        kept.append(edit)
    return kept
