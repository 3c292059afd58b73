# dosecalc/domain/services/tablet_resolver.py
from __future__ import annotations

import logging
from typing import List, Optional

from dosecalc.domain.models import Product, Route, TabletScheme, TabletSpecification, WeightRange
from dosecalc.domain.plans import TabletDosage, TabletPlan
from dosecalc.domain.ports import DosageResolverPort

logger = logging.getLogger(__name__)


def first_matching_range(spec: TabletSpecification, weight: float) -> Optional[WeightRange]:
    # catalog order; bands of one specification never overlap, but the
    # scan still stops at the first hit
    for band in spec.weight_ranges:
        if band.contains(weight):
            return band
    return None


class TabletRangeResolver(DosageResolverPort):
    """
    Weight → tablet lines for range-banded products.

    Every specification is scanned independently, so one weight can match
    several strengths at once (alternative ways to give the same dose).
    All matches are returned, in type then specification order.
    """

    def resolve(self, weight: float, product: Product, route: Optional[Route] = None) -> Optional[TabletPlan]:
        scheme = product.scheme
        if not isinstance(scheme, TabletScheme):
            return None
        if weight < scheme.min_weight or weight > scheme.max_weight:
            return None

        dosages: List[TabletDosage] = []
        for ttype in scheme.types:
            for spec in ttype.specifications:
                band = first_matching_range(spec, weight)
                if band is None:
                    continue
                dosages.append(TabletDosage(type=ttype.name, specification=spec.dosage, count=band.count))

        if not dosages:
            logger.debug("no tablet band matched weight=%s product=%s", weight, product.id)
            return None
        return TabletPlan(weight=weight, dosages=tuple(dosages), product_id=product.id)
