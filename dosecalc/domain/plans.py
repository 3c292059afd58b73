# dosecalc/domain/plans.py
"""
Result types returned by the dosage engine.

Every result is a frozen dataclass with a `kind` tag so callers (API,
CLI) can switch on it without isinstance checks. The error members are
values, not exceptions.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .models import LocalizedText


class ResultKind(str, Enum):
    TABLET = "tablet"
    VIAL = "vial"
    OUT_OF_RANGE = "out_of_range"
    UNKNOWN_PRODUCT = "unknown_product"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class TabletDosage:
    type: LocalizedText
    specification: str
    count: float


@dataclass(frozen=True)
class TabletPlan:
    weight: float
    dosages: Tuple[TabletDosage, ...]
    product_id: str = ""
    kind: ResultKind = field(default=ResultKind.TABLET, init=False)


@dataclass(frozen=True)
class VialAlternative:
    combination: Tuple[int, ...]
    total_mg: int
    strength_counts: Dict[int, int]


@dataclass(frozen=True)
class VialPlan:
    weight: float
    total_dose_mg: float
    per_kg_rate: float
    is_child: bool
    strength_counts: Dict[int, int]
    combination: Tuple[int, ...]
    total_mg_delivered: int
    concentration: float                    # mg/ml
    route: str                              # "iv" | "im" | "both"
    product_id: str = ""
    # single solvent
    reconstitution_volume: Optional[float] = None
    injection_volume: Optional[float] = None
    # dual solvent
    bicarbonate_volume: Optional[float] = None
    saline_volume: Optional[float] = None
    exact_injection_volume: Optional[float] = None
    rounded_injection_volume: Optional[float] = None
    alternatives: Tuple[VialAlternative, ...] = ()
    kind: ResultKind = field(default=ResultKind.VIAL, init=False)

    @property
    def unit_count(self) -> int:
        return len(self.combination)


@dataclass(frozen=True)
class OutOfRange:
    min_weight: float
    max_weight: float
    product_id: str = ""
    weight: Optional[float] = None
    kind: ResultKind = field(default=ResultKind.OUT_OF_RANGE, init=False)


@dataclass(frozen=True)
class UnknownProduct:
    product_id: Any = None
    kind: ResultKind = field(default=ResultKind.UNKNOWN_PRODUCT, init=False)


@dataclass(frozen=True)
class InvalidInput:
    param: str
    reason: str
    value: Any = None
    kind: ResultKind = field(default=ResultKind.INVALID_INPUT, init=False)


DosagePlan = Union[TabletPlan, VialPlan]
Result = Union[TabletPlan, VialPlan, OutOfRange, UnknownProduct, InvalidInput]


def is_plan(result: Result) -> bool:
    return result.kind in (ResultKind.TABLET, ResultKind.VIAL)


def result_to_dict(result: Result) -> Dict[str, Any]:
    """JSON-friendly dict (enum tags as plain strings, tuples as lists)."""
    out = asdict(result)
    out["kind"] = result.kind.value
    if isinstance(result, InvalidInput):
        out["value"] = None if result.value is None else str(result.value)
    return _jsonable(out)


def _jsonable(x: Any) -> Any:
    if isinstance(x, Enum):
        return x.value
    if isinstance(x, dict):
        return {(str(k) if not isinstance(k, str) else k): _jsonable(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [_jsonable(v) for v in x]
    return x


def plan_lines(result: Result) -> List[str]:
    """Short, language-neutral description used in log lines."""
    if isinstance(result, TabletPlan):
        return [f"{d.specification} x{d.count}" for d in result.dosages]
    if isinstance(result, VialPlan):
        return [f"{mg}mg x{n}" for mg, n in result.strength_counts.items()]
    return [result.kind.value]
