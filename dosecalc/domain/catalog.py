# dosecalc/domain/catalog.py
"""
Static product reference data.

The tables below reproduce the published dosing charts; do not edit the
numbers without the chart they come from.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import (
    DosageFormula, Product, Route, TabletScheme, TabletSpecification,
    TabletType, VialScheme, VialStrength, WeightRange,
)

DARTEPP = "dartepp"
ARGESUN = "argesun"
ARTESUN = "artesun"


def _bands(*rows) -> tuple:
    return tuple(WeightRange(min=lo, max=hi, count=n) for lo, hi, n in rows)


# ── D-Artepp (range-tablet) ──────────────────────────────────────
DARTEPP_PRODUCT = Product(
    id=DARTEPP,
    name="D-Artepp®",
    description={
        "en": "Antimalarial Dosage Calculator",
        "zh": "抗疟疾药物剂量计算器",
        "fr": "Calculateur de Dosage Antipaludique",
    },
    scheme=TabletScheme(
        types=(
            TabletType(
                name={
                    "en": "D-ARTEPP Dispersible",
                    "zh": "D-ARTEPP 分散片",
                    "fr": "D-ARTEPP Dispersible",
                },
                specifications=(
                    TabletSpecification("20mg/120mg", _bands(
                        (5, 8, 1), (11, 17, 2), (17, 25, 3), (25, 36, 4),
                        (36, 60, 6), (60, 80, 8), (80, 100, 10),
                    )),
                    TabletSpecification("30mg/180mg", _bands(
                        (8, 11, 1), (17, 25, 2), (36, 60, 4),
                    )),
                    TabletSpecification("40mg/240mg", _bands(
                        (11, 17, 1), (25, 36, 2), (36, 60, 3), (60, 80, 4),
                        (80, 100, 5),
                    )),
                ),
            ),
            TabletType(
                name={"en": "D-ARTEPP", "zh": "D-ARTEPP", "fr": "D-ARTEPP"},
                specifications=(
                    TabletSpecification("40mg/240mg", _bands(
                        (17, 25, 1.5), (25, 36, 2), (36, 60, 3), (60, 80, 4),
                        (80, 100, 5),
                    )),
                    TabletSpecification("60mg/360mg", _bands(
                        (17, 25, 1), (36, 60, 2),
                    )),
                    TabletSpecification("80mg/480mg", _bands(
                        (25, 36, 1), (36, 60, 1.5), (60, 80, 2), (80, 100, 2.5),
                    )),
                ),
            ),
        ),
        min_weight=5,
        max_weight=100,
    ),
)

# ── Argesun (single solvent, 20 mg/ml after reconstitution) ──────
ARGESUN_PRODUCT = Product(
    id=ARGESUN,
    name="Argesun®",
    description={
        "en": "Artesunate Injection Dosage Calculator",
        "zh": "注射用青蒿琥酯剂量计算器",
        "fr": "Calculateur de Dosage Artesunate Injectible",
    },
    scheme=VialScheme(
        formula=DosageFormula(child=3.0, adult=2.4),
        strengths=(
            VialStrength(mg=30, solvent_volume=1.5, vial_size="5ml", ampoule_size="3ml"),
            VialStrength(mg=60, solvent_volume=3.0, vial_size="5ml", ampoule_size="3ml"),
            VialStrength(mg=120, solvent_volume=6.0, vial_size="7ml", ampoule_size="6ml"),
            VialStrength(mg=180, solvent_volume=9.0, vial_size="10ml", ampoule_size="10ml"),
        ),
        reconstituted_concentration=20,
        min_weight=0,
        max_weight=100,
    ),
)

# ── Artesun (dual solvent: bicarbonate + saline) ─────────────────
ARTESUN_PRODUCT = Product(
    id=ARTESUN,
    name="Artesun®",
    description={
        "en": "Artesunate for Injection",
        "zh": "注射用青蒿琥酯",
        "fr": "Artesunate pour Injection",
    },
    scheme=VialScheme(
        formula=DosageFormula(child=3.0, adult=2.4),
        strengths=(
            VialStrength(
                mg=30, bicarbonate_volume=0.5, saline_volume=2.5, im_saline_volume=1.0,
                after_reconstitution=0.5, after_dilution_iv=6.0, after_dilution_im=3.0,
            ),
            VialStrength(
                mg=60, bicarbonate_volume=1.0, saline_volume=5.0, im_saline_volume=2.0,
                after_reconstitution=1.0, after_dilution_iv=6.0, after_dilution_im=3.0,
            ),
            VialStrength(
                mg=120, bicarbonate_volume=2.0, saline_volume=10.0, im_saline_volume=4.0,
                after_reconstitution=2.0, after_dilution_iv=6.0, after_dilution_im=3.0,
            ),
        ),
        concentrations={Route.IV: 10, Route.IM: 20},
        min_weight=0,
        max_weight=100,
    ),
)


class ProductCatalog:
    """Read-only lookup over a fixed set of products (catalog order kept)."""

    def __init__(self, products: Iterable[Product]):
        self._products: Dict[str, Product] = {p.id: p for p in products}

    def get_product(self, product_id: str) -> Optional[Product]:
        if not isinstance(product_id, str):
            return None
        return self._products.get(product_id)

    def products(self) -> List[Product]:
        return list(self._products.values())

    def ids(self) -> List[str]:
        return list(self._products)

    def __contains__(self, product_id: object) -> bool:
        return isinstance(product_id, str) and product_id in self._products

    def __len__(self) -> int:
        return len(self._products)


DEFAULT_CATALOG = ProductCatalog([DARTEPP_PRODUCT, ARGESUN_PRODUCT, ARTESUN_PRODUCT])


def get_product(product_id: str) -> Optional[Product]:
    return DEFAULT_CATALOG.get_product(product_id)
