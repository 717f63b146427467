from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Sample:
    t: int  # epoch milliseconds
    v: float


@dataclass(frozen=True)
class AttributeSeries:
    key: str
    raw: Tuple[Sample, ...] = ()
    norm: Tuple[Sample, ...] = ()


# Output of one parse pass. Read-only after construction; projections and
# summaries derive new values from it and never write back.
@dataclass(frozen=True)
class ParseResult:
    by_attr: Mapping[str, AttributeSeries] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    attrs: Tuple[str, ...] = ()
    rows: int = 0
    t_min: Optional[int] = None
    t_max: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.by_attr, MappingProxyType):
            object.__setattr__(self, "by_attr", MappingProxyType(dict(self.by_attr)))
        object.__setattr__(self, "attrs", tuple(self.attrs))
