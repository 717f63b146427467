from __future__ import annotations

import logging
import math
import re
from datetime import datetime, tzinfo
from typing import Dict, List, Optional, Tuple

from smart_plotter.data_processing.schemas import AttributeSeries, ParseResult, Sample

log = logging.getLogger(__name__)


LINE_SPLIT_RE = re.compile(r"\r?\n")
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$", re.ASCII)
TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S"

# Decimal numbers (sign, fraction, exponent) or unsigned 0x/0o/0b integers.
DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
PREFIXED_INT_RE = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

FIELD_SEP = ";"
MIN_FIELDS = 4  # timestamp + one (attr, norm, raw) triplet


def split_fields(line: str) -> List[str]:
    """Split a row on ';', trim whitespace/tabs, drop empty fields."""
    fields = (f.strip() for f in line.split(FIELD_SEP))
    return [f for f in fields if f]


def parse_timestamp_ms(s: str, tz: Optional[tzinfo] = None) -> Optional[int]:
    """
    'YYYY-MM-DD HH:mm:ss' -> epoch milliseconds.

    The input carries no zone: it is read as local wall-clock time unless
    `tz` is given. Returns None for anything that does not resolve to a
    real instant.
    """
    s = s.strip()
    if not TIMESTAMP_RE.match(s):
        return None
    try:
        dt = datetime.strptime(s, TIMESTAMP_FMT)
        if tz is not None:
            dt = dt.replace(tzinfo=tz)
        return int(dt.timestamp()) * 1000
    except (ValueError, OverflowError, OSError):
        return None


def parse_number(s: str) -> Optional[float]:
    s = s.strip()
    if DECIMAL_RE.match(s):
        try:
            v = float(s)
        except (ValueError, OverflowError):
            return None
        return v if math.isfinite(v) else None
    if PREFIXED_INT_RE.match(s):
        return float(int(s, 0))
    return None


def _attr_sort_key(key: str) -> Tuple[int, float]:
    v = parse_number(key)
    if v is None:
        return (1, 0.0)
    return (0, v)


class _SeriesBuilder:
    """Mutable per-attribute accumulator used only during a scan."""

    def __init__(self, key: str):
        self.key = key
        self.raw: List[Sample] = []
        self.norm: List[Sample] = []

    def build(self) -> AttributeSeries:
        # sorted() is stable: equal timestamps keep file order
        return AttributeSeries(
            key=self.key,
            raw=tuple(sorted(self.raw, key=lambda p: p.t)),
            norm=tuple(sorted(self.norm, key=lambda p: p.t)),
        )


def parse(text: str, *, tz: Optional[tzinfo] = None) -> ParseResult:
    """
    Parse SMART log text into a ParseResult.

    Format, one row per line:
      YYYY-MM-DD HH:mm:ss; attr; norm; raw; attr; norm; raw; ...

    Malformed lines, triplets and values are skipped; this never raises
    for bad content. A row is counted (and moves t_min/t_max) as soon as it
    has >= 4 fields and a valid timestamp, even if none of its triplets
    yield a sample.
    """
    builders: Dict[str, _SeriesBuilder] = {}
    rows = 0
    t_min: Optional[int] = None
    t_max: Optional[int] = None
    short_lines = 0
    bad_timestamps = 0

    for line in LINE_SPLIT_RE.split(text or ""):
        line = line.strip()
        if not line:
            continue

        fields = split_fields(line)
        if len(fields) < MIN_FIELDS:
            short_lines += 1
            continue

        t = parse_timestamp_ms(fields[0], tz)
        if t is None:
            bad_timestamps += 1
            continue

        t_min = t if t_min is None else min(t_min, t)
        t_max = t if t_max is None else max(t_max, t)

        # Triplets from index 1: attr, norm, raw
        for i in range(1, len(fields) - 2, 3):
            attr = fields[i]
            if not attr:
                continue
            norm_v = parse_number(fields[i + 1])
            raw_v = parse_number(fields[i + 2])
            if norm_v is None and raw_v is None:
                continue

            b = builders.get(attr)
            if b is None:
                b = builders[attr] = _SeriesBuilder(attr)
            if raw_v is not None:
                b.raw.append(Sample(t=t, v=raw_v))
            if norm_v is not None:
                b.norm.append(Sample(t=t, v=norm_v))

        rows += 1

    # dicts keep discovery order, so the stable sort leaves non-numeric keys
    # in the order they were first seen
    attrs = sorted(builders, key=_attr_sort_key)
    by_attr = {k: builders[k].build() for k in attrs}

    if short_lines or bad_timestamps:
        log.debug(
            "Skipped %d short line(s) and %d line(s) with an invalid timestamp",
            short_lines,
            bad_timestamps,
        )

    return ParseResult(by_attr=by_attr, attrs=tuple(attrs), rows=rows, t_min=t_min, t_max=t_max)
