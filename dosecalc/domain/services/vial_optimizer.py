# dosecalc/domain/services/vial_optimizer.py
"""
Vial selection for injectable products.

Pipeline per call:
  1) target dose   = weight × (child | adult) mg/kg
  2) greedy        = largest strengths first, top up with one smallest vial
  3) consolidation = one pass of "several small vials → one bigger vial"
  4) volumes       = solvent (single solvent) or bicarbonate + saline and a
                     clinically rounded injection volume (dual solvent)

Consolidation is deliberately a single pass: a multiset that could be
shrunk twice (e.g. excess 30 mg *and* 60 mg vials) is only shrunk once.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from dosecalc.domain.models import CHILD_WEIGHT_LIMIT, Product, Route, VialScheme
from dosecalc.domain.plans import VialAlternative, VialPlan
from dosecalc.domain.ports import DosageResolverPort

logger = logging.getLogger(__name__)

# a consolidated multiset must still deliver this share of the target dose
MIN_DELIVERED_RATIO = 0.95
# single-strength alternatives must stay within [-5%, +10%] of the chosen mg
ALT_MIN_RATIO = 0.95
ALT_MAX_RATIO = 1.1

# (route, is_child) -> (threshold ml, inclusive, rounded-up ml)
INJECTION_VOLUME_FLOORS: Dict[Tuple[Route, bool], Tuple[float, bool, float]] = {
    (Route.IV, True): (2.0, True, 2.0),
    (Route.IV, False): (7.0, True, 7.0),
    (Route.IM, True): (1.0, False, 1.0),
    (Route.IM, False): (4.0, True, 4.0),
}


def to_fixed(x: float, places: int) -> float:
    """Round half-up on the exact binary value (same result as JS toFixed)."""
    q = Decimal(1).scaleb(-places)
    return float(Decimal(x).quantize(q, rounding=ROUND_HALF_UP))


def strength_counts(combination: Sequence[int]) -> Dict[int, int]:
    counts: Dict[int, int] = {}
    for mg in combination:
        counts[mg] = counts.get(mg, 0) + 1
    return counts


# ── Step 2: greedy ───────────────────────────────────────────────
def greedy_combination(total_dose: float, denominations: Sequence[int]) -> List[int]:
    """Largest-first fill; a leftover remainder gets one smallest vial."""
    ordered = sorted(denominations, reverse=True)
    if not ordered:
        return []
    combination: List[int] = []
    remaining = total_dose
    for mg in ordered:
        n = math.floor(remaining / mg)
        if n > 0:
            combination.extend([mg] * n)
            remaining -= n * mg
    if remaining > 0:
        combination.append(ordered[-1])  # over-fill rather than under-dose
    return combination


# ── Step 3: consolidation ────────────────────────────────────────
def consolidation_rules(denominations: Sequence[int]) -> List[Tuple[int, int]]:
    """(denomination, group size) in priority order."""
    ordered = sorted(denominations)
    if not ordered:
        return []
    smallest = ordered[0]
    rules = [(smallest, 4), (smallest, 2)]
    if len(ordered) > 1:
        rules.append((ordered[1], 2))
    return rules


def consolidate(combination: Sequence[int], denominations: Sequence[int]) -> Optional[List[int]]:
    """
    Apply the first applicable replacement rule once.
    Returns the new multiset (descending) or None when no rule applies.
    """
    available = set(denominations)
    counts = Counter(combination)
    for mg, group in consolidation_rules(denominations):
        bigger = mg * group
        if counts[mg] < group or bigger not in available:
            continue
        out = [x for x in combination if x != mg]
        out.extend([bigger] * (counts[mg] // group))
        out.extend([mg] * (counts[mg] % group))
        return sorted(out, reverse=True)
    return None


def choose_combination(total_dose: float, denominations: Sequence[int]) -> Tuple[List[int], int]:
    greedy = greedy_combination(total_dose, denominations)
    optimized = consolidate(greedy, denominations)
    if optimized is not None and len(optimized) < len(greedy):
        optimized_mg = sum(optimized)
        if optimized_mg >= total_dose * MIN_DELIVERED_RATIO:
            return optimized, optimized_mg
    return greedy, sum(greedy)


def alternatives(combination: Sequence[int], denominations: Sequence[int]) -> List[VialAlternative]:
    """Single-strength multisets close to the chosen combination's mg."""
    current = sum(combination)
    out: List[VialAlternative] = []
    if current <= 0:
        return out
    for mg in sorted(denominations, reverse=True):
        n = math.ceil(current / mg)
        alt = [mg] * n
        alt_total = sum(alt)
        if current * ALT_MIN_RATIO <= alt_total <= current * ALT_MAX_RATIO:
            out.append(VialAlternative(
                combination=tuple(alt), total_mg=alt_total, strength_counts=strength_counts(alt),
            ))
    return out


# ── Step 4: clinical rounding ────────────────────────────────────
def round_injection_volume(exact: float, route: Route, is_child: bool) -> float:
    """
    Small volumes are raised to a practical minimum per route and age group;
    larger volumes are kept. Result has 2 decimals.
    """
    threshold, inclusive, floor_ml = INJECTION_VOLUME_FLOORS[(Route(route), bool(is_child))]
    below = exact <= threshold if inclusive else exact < threshold
    return to_fixed(floor_ml if below else exact, 2)


class VialCombinationOptimizer(DosageResolverPort):
    def resolve(self, weight: float, product: Product, route: Optional[Route] = None) -> Optional[VialPlan]:
        scheme = product.scheme
        if not isinstance(scheme, VialScheme):
            return None
        if weight < scheme.min_weight or weight > scheme.max_weight:
            return None
        if scheme.dual_solvent:
            try:
                route = Route(route)
            except ValueError:
                return None
            if route not in scheme.concentrations:
                return None

        per_kg = scheme.formula.rate_for(weight)
        total_dose = weight * per_kg
        denominations = [s.mg for s in scheme.strengths_desc()]
        combination, total_mg = choose_combination(total_dose, denominations)

        common = dict(
            weight=weight,
            total_dose_mg=total_dose,
            per_kg_rate=per_kg,
            is_child=weight < CHILD_WEIGHT_LIMIT,
            strength_counts=strength_counts(combination),
            combination=tuple(combination),
            total_mg_delivered=total_mg,
            product_id=product.id,
            alternatives=tuple(alternatives(combination, denominations)),
        )
        if scheme.dual_solvent:
            plan = self._dual_solvent(scheme, combination, route, common)
        else:
            plan = self._single_solvent(scheme, combination, common)

        logger.debug(
            "vial plan product=%s weight=%s dose=%.2fmg combination=%s",
            product.id, weight, total_dose, plan.combination,
        )
        return plan

    @staticmethod
    def _single_solvent(scheme: VialScheme, combination: List[int], common: dict) -> VialPlan:
        concentration = scheme.reconstituted_concentration
        reconstitution = sum((scheme.strength(mg).solvent_volume or 0.0) for mg in combination)
        return VialPlan(
            **common,
            concentration=concentration,
            route="both",  # same volume for IV and IM
            reconstitution_volume=reconstitution,
            injection_volume=common["total_dose_mg"] / concentration,
        )

    @staticmethod
    def _dual_solvent(scheme: VialScheme, combination: List[int], route: Route, common: dict) -> VialPlan:
        bicarbonate = 0.0
        saline = 0.0
        for mg in combination:
            s = scheme.strength(mg)
            bicarbonate += s.bicarbonate_volume or 0.0
            saline += s.saline_for(route)

        concentration = scheme.concentrations[route]
        exact = common["total_dose_mg"] / concentration
        return VialPlan(
            **common,
            concentration=concentration,
            route=route.value,
            bicarbonate_volume=to_fixed(bicarbonate, 1),
            saline_volume=to_fixed(saline, 1),
            exact_injection_volume=to_fixed(exact, 2),
            rounded_injection_volume=round_injection_volume(exact, route, common["is_child"]),
        )
