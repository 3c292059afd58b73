# dosecalc/application/use_cases.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from dosecalc.application.commands import ComputeDosageCommand
from dosecalc.application.engine import DosageEngine, coerce_weight
from dosecalc.domain.models import Product, TabletScheme, localize
from dosecalc.domain.plans import VialPlan, is_plan, result_to_dict
from dosecalc.services.summary import (
    calculator_heading, error_message, result_subtitle, result_title, summary_lines,
)
from dosecalc.services.translator import Translator

logger = logging.getLogger("dosecalc.compute")


class ComputeDosageUseCase:
    """
    Engine result + localized labels, shaped for the API and the CLI.

    Output:
      kind      tablet | vial | out_of_range | unknown_product | invalid_input
      result    engine result as plain JSON
      title / subtitle / summary / message   localized strings
    """
    def __init__(self, engine: DosageEngine, translator: Translator):
        self.engine = engine
        self.tr = translator

    def execute(self, cmd: ComputeDosageCommand, lang: str | None = None) -> Dict[str, Any]:
        lang = lang if self.tr.supports(lang) else self.tr.resolve_language(cmd.lang)
        result = self.engine.compute(cmd.weight, cmd.product_id, cmd.route)
        product = self.engine.catalog.get_product(cmd.product_id)

        weight = getattr(result, "weight", None)
        if weight is None:
            weight = coerce_weight(cmd.weight)
        out = {
            "kind": result.kind.value,
            "lang": lang,
            "result": result_to_dict(result),
            "title": result_title(product, weight, self.tr, lang),
            "subtitle": result_subtitle(product, self.tr, lang),
            "summary": summary_lines(result, self.tr, lang),
            "message": error_message(result, product, self.tr, lang),
        }
        if isinstance(result, VialPlan) and product is not None:
            out["strength_details"] = self._strength_details(product, result)

        logger.info("[compute] product=%s weight=%r route=%s kind=%s",
                    cmd.product_id, cmd.weight, cmd.route, out["kind"])
        if not is_plan(result):
            logger.debug("[compute] message=%s", out["message"])
        return out

    @staticmethod
    def _strength_details(product: Product, plan: VialPlan) -> List[Dict[str, Any]]:
        """Packaging info for each chosen denomination (vial size, volumes)."""
        details = []
        for mg, count in plan.strength_counts.items():
            s = product.scheme.strength(mg)
            if s is None:
                continue
            row = {k: v for k, v in vars(s).items() if v is not None}
            row["count"] = count
            details.append(row)
        return details

    # ── catalog views ────────────────────────────────────────────
    def describe_product(self, product: Product, lang: str) -> Dict[str, Any]:
        title, desc = calculator_heading(product, self.tr, lang)
        info: Dict[str, Any] = {
            "id": product.id,
            "name": product.name,
            "description": localize(product.description, lang),
            "calculator_title": title,
            "calculator_description": desc,
            "scheme": "tablet" if isinstance(product.scheme, TabletScheme) else "vial",
            "min_weight": product.min_weight,
            "max_weight": product.max_weight,
            "routes": [r.value for r in product.routes],
        }
        if isinstance(product.scheme, TabletScheme):
            info["types"] = [
                {
                    "name": localize(t.name, lang),
                    "specifications": [s.dosage for s in t.specifications],
                }
                for t in product.scheme.types
            ]
        else:
            info["strengths_mg"] = [s.mg for s in product.scheme.strengths_desc()]
            info["formula"] = {
                "child": product.scheme.formula.child,
                "adult": product.scheme.formula.adult,
            }
            info["route_labels"] = {
                r.value: {
                    "label": self.tr.t(f"{r.value}Route", lang),
                    "description": self.tr.t(f"{r.value}RouteDesc", lang),
                }
                for r in product.routes
            }
        return info

    def list_products(self, lang: str) -> List[Dict[str, Any]]:
        return [self.describe_product(p, lang) for p in self.engine.catalog.products()]

    def get_product(self, product_id: str, lang: str) -> Optional[Dict[str, Any]]:
        p = self.engine.catalog.get_product(product_id)
        return self.describe_product(p, lang) if p else None
