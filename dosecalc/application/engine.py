# dosecalc/application/engine.py
from __future__ import annotations

import logging
import math
from decimal import Decimal
from numbers import Real
from typing import Any, Dict, Optional, Type

from dosecalc.domain.catalog import DEFAULT_CATALOG, ProductCatalog
from dosecalc.domain.models import DosingScheme, Product, Route, TabletScheme, VialScheme
from dosecalc.domain.plans import (
    InvalidInput, OutOfRange, Result, UnknownProduct, plan_lines,
)
from dosecalc.domain.ports import DosageResolverPort
from dosecalc.domain.services.tablet_resolver import TabletRangeResolver
from dosecalc.domain.services.vial_optimizer import VialCombinationOptimizer

logger = logging.getLogger("dosecalc.engine")


def coerce_weight(weight: Any) -> Optional[float]:
    # bool is an int subclass; a checkbox value is not a weight
    if isinstance(weight, bool) or not isinstance(weight, (Real, Decimal)):
        return None
    if isinstance(weight, Decimal) and weight.is_nan():
        return None
    w = float(weight)
    if math.isnan(w) or math.isinf(w):
        return None
    return w


class DosageEngine:
    """
    Single entry point for dosage computation.

    compute(weight, product_id, route) never raises on bad input: unknown
    products, out-of-range weights and malformed values come back as
    UnknownProduct / OutOfRange / InvalidInput results.
    """

    def __init__(
        self,
        catalog: ProductCatalog | None = None,
        resolvers: Dict[Type, DosageResolverPort] | None = None,
    ):
        self.catalog = catalog or DEFAULT_CATALOG
        self.resolvers: Dict[Type, DosageResolverPort] = resolvers or {
            TabletScheme: TabletRangeResolver(),
            VialScheme: VialCombinationOptimizer(),
        }

    def resolver_for(self, scheme: DosingScheme) -> DosageResolverPort:
        return self.resolvers[type(scheme)]

    def compute(self, weight: Any, product_id: Any, route: Any = None) -> Result:
        product = self.catalog.get_product(product_id)
        if product is None:
            logger.info("unknown product id=%r", product_id)
            return UnknownProduct(product_id=product_id)

        w = coerce_weight(weight)
        if w is None:
            logger.debug("invalid weight product=%s weight=%r", product.id, weight)
            return InvalidInput(param="weight", reason="weight must be a finite number", value=weight)

        checked_route, err = self._check_route(product, route)
        if err is not None:
            logger.debug("invalid route product=%s route=%r", product.id, route)
            return err

        if not product.in_domain(w):
            logger.debug("weight out of range product=%s weight=%s", product.id, w)
            return OutOfRange(
                min_weight=product.min_weight, max_weight=product.max_weight,
                product_id=product.id, weight=w,
            )

        plan = self.resolver_for(product.scheme).resolve(w, product, checked_route)
        if plan is None:
            # inside the domain but not covered by any band (tablet 100 kg)
            return OutOfRange(
                min_weight=product.min_weight, max_weight=product.max_weight,
                product_id=product.id, weight=w,
            )

        logger.debug("computed product=%s weight=%s route=%s -> %s",
                     product.id, w, checked_route, plan_lines(plan))
        return plan

    @staticmethod
    def _check_route(product: Product, route: Any):
        """Route is required for dual-solvent products and ignored otherwise."""
        if not product.routes:
            return None, None
        if route is None or route == "":
            return None, InvalidInput(param="route", reason=f"route required for {product.id}", value=route)
        try:
            r = Route(route.lower() if isinstance(route, str) else route)
        except ValueError:
            return None, InvalidInput(param="route", reason="route must be 'iv' or 'im'", value=route)
        if r not in product.routes:
            return None, InvalidInput(param="route", reason=f"route not available for {product.id}", value=route)
        return r, None
