# dosecalc/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

# Localized text, keyed by language code ("en", "zh", "fr").
LocalizedText = Dict[str, str]

CHILD_WEIGHT_LIMIT = 20  # kg; below this the child formula applies


class Route(str, Enum):
    IV = "iv"
    IM = "im"


def localize(text: LocalizedText, lang: str) -> str:
    """Pick the requested language, fall back to English."""
    return text.get(lang) or text.get("en") or ""


# ── Range-tablet scheme ──────────────────────────────────────────
@dataclass(frozen=True)
class WeightRange:
    """Half-open band [min, max) in kg mapped to a tablet count."""
    min: float
    max: float
    count: float  # may be fractional (1.5 tablets)

    def contains(self, weight: float) -> bool:
        return self.min <= weight < self.max


@dataclass(frozen=True)
class TabletSpecification:
    dosage: str                              # strength pair, e.g. "20mg/120mg"
    weight_ranges: Tuple[WeightRange, ...]   # catalog order, first match wins


@dataclass(frozen=True)
class TabletType:
    name: LocalizedText
    specifications: Tuple[TabletSpecification, ...]


@dataclass(frozen=True)
class TabletScheme:
    types: Tuple[TabletType, ...]
    min_weight: float = 5
    max_weight: float = 100


# ── Vial scheme ──────────────────────────────────────────────────
@dataclass(frozen=True)
class DosageFormula:
    child: float  # mg/kg for weight < 20
    adult: float  # mg/kg for weight >= 20

    def rate_for(self, weight: float) -> float:
        return self.child if weight < CHILD_WEIGHT_LIMIT else self.adult


@dataclass(frozen=True)
class VialStrength:
    """
    One vial denomination and its fixed per-unit volumes (ml).

    Single-solvent products only fill `solvent_volume` (+ packaging sizes);
    dual-solvent products fill the bicarbonate/saline volumes.
    """
    mg: int
    solvent_volume: Optional[float] = None
    vial_size: Optional[str] = None
    ampoule_size: Optional[str] = None
    bicarbonate_volume: Optional[float] = None
    saline_volume: Optional[float] = None      # IV
    im_saline_volume: Optional[float] = None   # IM
    after_reconstitution: Optional[float] = None
    after_dilution_iv: Optional[float] = None
    after_dilution_im: Optional[float] = None

    def saline_for(self, route: Route) -> float:
        vol = self.saline_volume if route == Route.IV else self.im_saline_volume
        return vol or 0.0


@dataclass(frozen=True)
class VialScheme:
    formula: DosageFormula
    strengths: Tuple[VialStrength, ...]
    # route -> mg/ml; empty for single-solvent products
    concentrations: Dict[Route, float] = field(default_factory=dict)
    # fixed concentration after reconstitution (single-solvent products)
    reconstituted_concentration: Optional[float] = None
    min_weight: float = 0
    max_weight: float = 100

    @property
    def dual_solvent(self) -> bool:
        return bool(self.concentrations)

    def strengths_desc(self) -> Tuple[VialStrength, ...]:
        return tuple(sorted(self.strengths, key=lambda s: s.mg, reverse=True))

    def strength(self, mg: int) -> Optional[VialStrength]:
        for s in self.strengths:
            if s.mg == mg:
                return s
        return None


DosingScheme = Union[TabletScheme, VialScheme]


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: LocalizedText
    scheme: DosingScheme

    @property
    def min_weight(self) -> float:
        return self.scheme.min_weight

    @property
    def max_weight(self) -> float:
        return self.scheme.max_weight

    @property
    def is_tablet(self) -> bool:
        return isinstance(self.scheme, TabletScheme)

    @property
    def routes(self) -> Tuple[Route, ...]:
        if isinstance(self.scheme, VialScheme) and self.scheme.dual_solvent:
            return tuple(self.scheme.concentrations)
        return ()

    def in_domain(self, weight: float) -> bool:
        return self.min_weight <= weight <= self.max_weight
