"""Bulk coordinate ingest for pasted ``lat, lng`` lists."""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from ..errors import InsufficientPointsError, MalformedLineError, OutOfBoundsError
from ..models.domain import BoundingBox, Coordinate, Ring
from .geospatial import close_ring, is_valid_coordinate

_SEPARATOR = re.compile(r"[,\s;]+")


def _parse_line(line: str, line_number: int) -> Coordinate:
    tokens = [token for token in _SEPARATOR.split(line.strip()) if token]
    if len(tokens) != 2:
        raise MalformedLineError(line_number, line)
    try:
        lat, lng = float(tokens[0]), float(tokens[1])
    except ValueError as exc:
        raise MalformedLineError(line_number, line) from exc
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise MalformedLineError(line_number, line)
    return Coordinate(lat=lat, lng=lng)


def parse(lines: Iterable[str], bounds: Optional[BoundingBox] = None) -> Ring:
    """Parse ``lat, lng`` lines into a closed ring.

    Blank lines are skipped but still counted, so reported line numbers match
    what the operator sees in the pasted text. A last line repeating the first is
    accepted; the ring is closed either way.
    """

    points: list[Coordinate] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        point = _parse_line(line, line_number)
        if not is_valid_coordinate(point, bounds):
            raise OutOfBoundsError(line_number, point.lat, point.lng)
        points.append(point)

    open_points = points[:-1] if len(points) > 1 and points[0] == points[-1] else points
    distinct = len(set(open_points))
    if distinct < 3:
        raise InsufficientPointsError(distinct)
    return close_ring(points)


def parse_text(text: str, bounds: Optional[BoundingBox] = None) -> Ring:
    return parse(text.splitlines(), bounds)
