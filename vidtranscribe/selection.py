from __future__ import annotations

import re
from typing import List, Optional, Sequence

from vidtranscribe.errors import InvalidSelectionError, TrackOutOfRangeError
from vidtranscribe.types import TrackDescriptor

_INDEX_TOKEN = re.compile(r"[0-9]+")


def parse_selection(raw: Optional[str]) -> List[int]:
    """Parse ``"0,2,3"`` into ``[0, 2, 3]``.

    Duplicates are dropped keeping first-seen order. Empty tokens between
    commas are ignored; anything that is not a non-negative integer fails.
    """
    if raw is None or not str(raw).strip():
        raise InvalidSelectionError("Invalid track selection. Example: --tracks 0,2,3")

    parts = [p.strip() for p in str(raw).split(",") if p.strip()]
    indices: List[int] = []
    for position, token in enumerate(parts, start=1):
        if not _INDEX_TOKEN.fullmatch(token):
            raise InvalidSelectionError(f"Invalid track index at position {position}: {token}")
        indices.append(int(token))
    if not indices:
        raise InvalidSelectionError("Invalid track selection. Example: --tracks 0,2,3")

    return list(dict.fromkeys(indices))


def resolve_selection(track: Optional[str], tracks: Optional[str]) -> List[int]:
    """Build the selection from --track / --tracks; one of them is required."""
    if tracks is not None:
        return parse_selection(tracks)
    if track is not None:
        if "," in str(track):
            raise InvalidSelectionError(f"Invalid --track value: {track}. Use --tracks for several tracks.")
        return parse_selection(track)
    raise InvalidSelectionError("Provide either --track <n> or --tracks <n1,n2,...>.")


def validate_against_inventory(selection: Sequence[int], inventory: Sequence[TrackDescriptor]) -> None:
    for index in selection:
        if index < 0 or index >= len(inventory):
            raise TrackOutOfRangeError(
                f"Track {index} out of range ({len(inventory)} audio track(s) found). "
                "Use `vidtranscribe tracks` to list available tracks.",
                index=index,
            )
