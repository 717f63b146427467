from __future__ import annotations

import copy
from datetime import tzinfo
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from zoneinfo import ZoneInfo

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {"level": "INFO"},
    "parser": {"timezone": None},
    "labels": {"names_file": None},
    "loader": {
        "log_dir": "/var/lib/smartmontools",
        "file_globs": ["*.log", "*.txt", "*.csv", "*.tsv"],
    },
    "display": {"plot_mode": "both"},
}


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a mapping/dict: {path}")
    return data


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges override into base (override wins).
    """
    out = dict(base)
    for k, v in override.items():
        if (
            k in out
            and isinstance(out[k], dict)
            and isinstance(v, Mapping)
        ):
            out[k] = _deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads a YAML config file on top of DEFAULT_CONFIG, with optional
    inheritance via:
      extends: "base.yaml"
    or
      extends:
        - "base.yaml"
        - "other.yaml"

    Paths in 'extends' (and labels.names_file) are resolved relative to the
    file that declares them.
    """
    path = Path(path)

    cfg = load_yaml(path)
    _resolve_names_file(cfg, path)

    extends = cfg.get("extends")
    merged: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

    if extends:
        if isinstance(extends, (str, Path)):
            parents = [extends]
        elif isinstance(extends, list):
            parents = extends
        else:
            raise ValueError("Config key 'extends' must be a string or a list of strings.")

        for parent in parents:
            parent_path = Path(parent)
            if not parent_path.is_absolute():
                parent_path = (path.parent / parent_path).resolve()
            parent_cfg = load_config(parent_path)
            parent_cfg.pop("_meta", None)
            merged = _deep_merge(merged, parent_cfg)

    # Merge current cfg last (wins)
    cfg_no_extends = dict(cfg)
    cfg_no_extends.pop("extends", None)
    merged = _deep_merge(merged, cfg_no_extends)

    merged["_meta"] = {"config_path": str(path.resolve())}

    return merged


def _resolve_names_file(cfg: Dict[str, Any], path: Path) -> None:
    labels = cfg.get("labels")
    if not isinstance(labels, dict) or not labels.get("names_file"):
        return
    names_file = Path(labels["names_file"])
    if not names_file.is_absolute():
        labels["names_file"] = str((path.parent / names_file).resolve())


def resolve_timezone(cfg: Optional[Mapping[str, Any]]) -> Optional[tzinfo]:
    """
    parser.timezone as a tzinfo. None means local wall-clock time.
    Unknown zone names raise ZoneInfoNotFoundError.
    """
    if not cfg:
        return None
    name = (cfg.get("parser", {}) or {}).get("timezone")
    if not name:
        return None
    return ZoneInfo(str(name))
