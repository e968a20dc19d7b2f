import math
import time
import logging
from typing import Iterable, Iterator, TypeVar


log = logging.getLogger(__name__)

T = TypeVar('T')


def is_null_or_whitespace(value: str | None) -> bool:
    return value is None or value.strip() == ''


def parse_coordinates(raw: str | None) -> tuple[float, float] | None:
    """
    Parse a legacy 'lat,lon' coordinate string.

    Returns None for empty, malformed or non-finite input, and for values
    outside the valid latitude/longitude ranges.
    """
    if is_null_or_whitespace(raw):
        return None
    parts = raw.split(',')
    if len(parts) != 2:
        return None
    try:
        latitude, longitude = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return latitude, longitude


def batched(iterable: Iterable[T], size: int, report_every: int | None = 10_000) -> Iterator[list[T]]:
    batch: list[T] = []
    count = 0
    start = time.perf_counter()
    for item in iterable:
        batch.append(item)
        count += 1
        if report_every and count % report_every == 0:
            elapsed = time.perf_counter() - start
            log.info('%s records processed at %.0f records/s', count, count / elapsed)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch
