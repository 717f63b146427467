from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from tqdm import tqdm

from smart_plotter.data_processing.parse_smart_log import parse
from smart_plotter.data_processing.schemas import ParseResult
from smart_plotter.data_processing.summary import has_usable_data, summarize
from smart_plotter.utils.config import DEFAULT_CONFIG, resolve_timezone
from smart_plotter.utils.timer import timed

log = logging.getLogger(__name__)


def read_log_text(path: Union[str, Path]) -> str:
    """Whole file as text. A leading BOM is dropped; undecodable bytes become U+FFFD."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"SMART log not found: {path}")
    with path.open("r", encoding="utf-8-sig", errors="replace", newline="") as f:
        return f.read()


def find_log_files(root: Union[str, Path], globs: Optional[List[str]] = None) -> List[Path]:
    root = Path(root)
    if globs is None:
        globs = DEFAULT_CONFIG["loader"]["file_globs"]
    files: List[Path] = []
    for g in globs:
        files.extend(root.glob(g))
    return sorted(set([f for f in files if f.is_file()]))


def load_smart_log(
    path: Union[str, Path],
    cfg: Optional[Mapping[str, Any]] = None,
    timings: Optional[Dict[str, float]] = None,
) -> ParseResult:
    """Read and parse one log file. parser.timezone from `cfg` is honoured."""
    path = Path(path)
    tz = resolve_timezone(cfg)

    with timed("read", timings):
        text = read_log_text(path)

    with timed("parse", timings):
        result = parse(text, tz=tz)

    if not has_usable_data(result):
        log.warning("No usable data found in %s", path.as_posix())
    else:
        s = summarize(result, tz)
        log.info("Parsed %s: rows=%d attrs=%d range=%s", path.name, s.rows, s.attrs, s.time_range)
    return result


def load_smart_logs(
    root: Union[str, Path, None] = None,
    globs: Optional[List[str]] = None,
    cfg: Optional[Mapping[str, Any]] = None,
) -> Dict[str, ParseResult]:
    """
    Parse every matching log under `root` (default loader.log_dir), one
    independent ParseResult per file, keyed by path.
    """
    loader_cfg = dict(DEFAULT_CONFIG["loader"])
    if cfg:
        loader_cfg.update(cfg.get("loader", {}) or {})
    if root is None:
        root = loader_cfg["log_dir"]
    if globs is None:
        globs = loader_cfg["file_globs"]

    files = find_log_files(root, globs)
    if not files:
        raise FileNotFoundError(f"No SMART logs found under: {root}")

    results: Dict[str, ParseResult] = {}
    timings: Dict[str, float] = {}
    for fp in tqdm(files, desc="Parsing SMART logs"):
        results[str(fp)] = load_smart_log(fp, cfg, timings)

    log.info(
        "Loaded %d SMART log(s) from %s (read %.3fs, parse %.3fs)",
        len(results),
        Path(root).as_posix(),
        timings.get("read", 0.0),
        timings.get("parse", 0.0),
    )
    return results
