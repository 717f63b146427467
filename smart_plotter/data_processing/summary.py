from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from smart_plotter.data_processing.schemas import ParseResult

NO_VALUE = "—"
NO_DATA_STATUS = "No usable data found in file"
READY_STATUS = "Ready"


@dataclass(frozen=True)
class Summary:
    rows: int
    attrs: int
    time_range: str


def format_ms(ms: int, tz: Optional[tzinfo] = None) -> str:
    """Epoch ms -> 'YYYY-MM-DD HH:MM:SS' in local time (or `tz`)."""
    dt = datetime.fromtimestamp(ms / 1000, tz=tz)
    # strftime("%Y") does not zero-pad years < 1000 on every libc
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"


def format_date_ms(ms: int, tz: Optional[tzinfo] = None) -> str:
    return format_ms(ms, tz)[:10]


def summarize(result: ParseResult, tz: Optional[tzinfo] = None) -> Summary:
    if result.t_min is not None and result.t_max is not None:
        time_range = f"{format_ms(result.t_min, tz)} → {format_ms(result.t_max, tz)}"
    else:
        time_range = NO_VALUE
    return Summary(rows=result.rows, attrs=len(result.attrs), time_range=time_range)


def has_usable_data(result: ParseResult) -> bool:
    return result.rows > 0 and len(result.attrs) > 0


def status_message(result: ParseResult) -> str:
    return READY_STATUS if has_usable_data(result) else NO_DATA_STATUS
