from __future__ import annotations

from datetime import tzinfo
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from smart_plotter.data_processing.schemas import AttributeSeries, ParseResult


class PlotMode(Enum):
    RAW = "raw"
    NORM = "norm"
    BOTH = "both"

    @property
    def show_raw(self) -> bool:
        return self in (PlotMode.RAW, PlotMode.BOTH)

    @property
    def show_norm(self) -> bool:
        return self in (PlotMode.NORM, PlotMode.BOTH)

    @property
    def label(self) -> str:
        return {PlotMode.RAW: "Raw", PlotMode.NORM: "Normalized", PlotMode.BOTH: "Both"}[self]

    def next(self) -> "PlotMode":
        # both -> raw -> norm -> both
        return {PlotMode.BOTH: PlotMode.RAW, PlotMode.RAW: PlotMode.NORM, PlotMode.NORM: PlotMode.BOTH}[self]

    @classmethod
    def parse(cls, value: Union[str, "PlotMode"]) -> "PlotMode":
        if isinstance(value, PlotMode):
            return value
        s = str(value).strip().lower()
        if s == "normalized":
            s = "norm"
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"Unknown plot mode: {value!r} (expected raw, norm or both)") from None


def series_key(attr: str, kind: str) -> str:
    return f"{attr}_{kind}"


def default_selection(result: ParseResult) -> Optional[str]:
    return result.attrs[0] if result.attrs else None


def select_series(result: ParseResult, keys: Iterable[str]) -> List[AttributeSeries]:
    """Series for `keys` in the given order; unknown keys are skipped."""
    out: List[AttributeSeries] = []
    for k in keys:
        s = result.by_attr.get(k)
        if s is not None:
            out.append(s)
    return out


def _as_keys(keys: Union[str, Iterable[str], None]) -> List[str]:
    if keys is None:
        return []
    if isinstance(keys, str):
        return [keys]
    return list(keys)


def chart_rows(
    result: ParseResult,
    keys: Union[str, Iterable[str], None],
    mode: Union[str, PlotMode] = PlotMode.BOTH,
) -> List[Dict[str, float]]:
    """
    Wide rows for charting, one per distinct timestamp:
      [{"t": ms, "194_raw": v, "194_norm": v, ...}, ...]

    Columns with no sample at a timestamp are left out of that row. If an
    attribute has several samples at one timestamp the later one wins.
    """
    mode = PlotMode.parse(mode)
    by_t: Dict[int, Dict[str, float]] = {}

    for s in select_series(result, _as_keys(keys)):
        kinds = []
        if mode.show_raw:
            kinds.append(("raw", s.raw))
        if mode.show_norm:
            kinds.append(("norm", s.norm))
        for kind, samples in kinds:
            col = series_key(s.key, kind)
            for p in samples:
                row = by_t.setdefault(p.t, {"t": p.t})
                row[col] = p.v

    return [by_t[t] for t in sorted(by_t)]


def chart_frame(
    result: ParseResult,
    keys: Union[str, Iterable[str], None],
    mode: Union[str, PlotMode] = PlotMode.BOTH,
    tz: Optional[tzinfo] = None,
) -> pd.DataFrame:
    """
    chart_rows() as a DataFrame indexed by `t` (epoch ms), with a `time`
    column of tz-aware datetimes (UTC unless `tz` is given). Missing slots
    are NaN.
    """
    rows = chart_rows(result, keys, mode)
    if not rows:
        return pd.DataFrame(index=pd.Index([], name="t", dtype="int64"))

    df = pd.DataFrame(rows).set_index("t").sort_index()
    time = pd.to_datetime(df.index, unit="ms", utc=True)
    if tz is not None:
        time = time.tz_convert(tz)
    df.insert(0, "time", time)
    return df


def plot_mode_from_config(cfg: Optional[Mapping[str, Any]]) -> PlotMode:
    if not cfg:
        return PlotMode.BOTH
    return PlotMode.parse((cfg.get("display", {}) or {}).get("plot_mode", "both"))
