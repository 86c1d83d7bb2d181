"""Geometry signatures and drawn-precedence merge.

Feature identity for deduplication is the exact serialised geometry.
``canonicalize`` is not tolerant of coordinate precision or ordering:
``[73.8567, 18.5204]`` and ``[73.85670, 18.5204]`` serialise the
same (floats round-trip), but ``[1, 2]`` and ``[1.0, 2.0]`` do not, and a
ring starting at a different vertex is a different geometry.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kml_capture.models.feature import Feature


def canonicalize(geometry: dict[str, Any] | None) -> str:
    """Return the dedup signature of a GeoJSON geometry.

    Keys keep their insertion order and sequences keep their element
    order, so the signature is stable for the same in-memory structure.
    """
    return json.dumps(geometry, separators=(",", ":"), ensure_ascii=False)


def merge(drawn: Iterable[Feature], uploaded: Iterable[Feature]) -> list[Feature]:
    """Merge drawn and uploaded features into the canonical set.

    Every drawn feature is kept, in order.  Each uploaded feature is
    appended only if its signature does not match any drawn feature's
    signature, so on conflict the drawn feature wins.  Uploaded features
    are compared against drawn ones only; repeats inside the uploaded
    collection itself are kept as the file supplied them.
    """
    merged = list(drawn)
    drawn_signatures = {canonicalize(f.geometry) for f in merged}
    for feature in uploaded:
        if canonicalize(feature.geometry) not in drawn_signatures:
            merged.append(feature)
    return merged
