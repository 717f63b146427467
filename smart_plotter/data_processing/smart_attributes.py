from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from smart_plotter.utils.config import load_yaml

log = logging.getLogger(__name__)


# Well-known SMART attribute ids. Vendors reuse or redefine some of these;
# unknown ids are labelled with the bare id.
SMART_ATTR_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "1": "Read Error Rate",
        "2": "Throughput Performance",
        "3": "Spin-Up Time",
        "4": "Start/Stop Count",
        "5": "Reallocated Sectors Count",
        "6": "Read Channel Margin",
        "7": "Seek Error Rate",
        "8": "Seek Time Performance",
        "9": "Power-On Hours",
        "10": "Spin Retry Count",
        "11": "Recalibration Retries",
        "12": "Power Cycle Count",
        "13": "Soft Read Error Rate",
        "22": "Current Helium Level",
        "170": "Available Reserved Space",
        "171": "SSD Program Fail Count",
        "172": "SSD Erase Fail Count",
        "173": "SSD Wear Leveling Count",
        "174": "Unexpected Power Loss Count",
        "175": "Power Loss Protection Failure",
        "176": "Erase Fail Count",
        "177": "Wear Range Delta",
        "179": "Used Reserved Block Count Total",
        "180": "Unused Reserved Block Count Total",
        "181": "Program Fail Count Total",
        "182": "Erase Fail Count",
        "183": "SATA Downshift Error Count",
        "184": "End-to-End Error",
        "187": "Reported Uncorrectable Errors",
        "188": "Command Timeout",
        "189": "High Fly Writes",
        "190": "Airflow Temperature",
        "191": "G-sense Error Rate",
        "192": "Power-off Retract Count",
        "193": "Load Cycle Count",
        "194": "Temperature",
        "195": "Hardware ECC Recovered",
        "196": "Reallocation Event Count",
        "197": "Current Pending Sector Count",
        "198": "Offline Uncorrectable Sector Count",
        "199": "UltraDMA CRC Error Count",
        "200": "Multi-Zone Error Rate",
        "201": "Soft Read Error Rate",
        "202": "Data Address Mark Errors",
        "203": "Run Out Cancel",
        "204": "Soft ECC Correction",
        "205": "Thermal Asperity Rate",
        "206": "Flying Height",
        "207": "Spin High Current",
        "208": "Spin Buzz",
        "209": "Offline Seek Performance",
        "220": "Disk Shift",
        "221": "G-Sense Error Rate",
        "222": "Loaded Hours",
        "223": "Load/Unload Retry Count",
        "224": "Load Friction",
        "225": "Load/Unload Cycle Count",
        "226": "Load 'In'-time",
        "227": "Torque Amplification Count",
        "228": "Power-Off Retract Cycle",
        "230": "GMR Head Amplitude",
        "231": "Life Left",
        "232": "Endurance Remaining",
        "233": "Media Wearout Indicator",
        "234": "Average Erase Count",
        "235": "Good Block Count",
        "240": "Head Flying Hours",
        "241": "Total LBAs Written",
        "242": "Total LBAs Read",
        "250": "Read Error Retry Rate",
        "254": "Free Fall Protection",
    }
)


def attr_label(key: str, names: Optional[Mapping[str, str]] = SMART_ATTR_NAMES) -> str:
    if not names:
        return key
    name = names.get(key)
    return f"{key} — {name}" if name else key


def load_attr_names(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read an id -> name override table from YAML, e.g.
      194: Temperature Celsius
      "231": SSD Life Left
    Keys are stored as strings to match attribute keys from the parser.
    """
    data = load_yaml(path)
    names: Dict[str, str] = {}
    for k, v in data.items():
        if v is None:
            continue
        names[str(k).strip()] = str(v).strip()
    log.debug("Loaded %d attribute names from %s", len(names), path)
    return names


def attr_names_from_config(cfg: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Built-in table with labels.names_file (if configured) merged on top."""
    names = dict(SMART_ATTR_NAMES)
    if not cfg:
        return names
    names_file = (cfg.get("labels", {}) or {}).get("names_file")
    if names_file:
        names.update(load_attr_names(names_file))
    return names
