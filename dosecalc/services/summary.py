# dosecalc/services/summary.py
"""Localized text for engine results (titles, messages, plan lines)."""
from __future__ import annotations

from typing import List, Optional

from dosecalc.domain.models import Product, localize
from dosecalc.domain.plans import (
    InvalidInput, OutOfRange, Result, TabletPlan, UnknownProduct, VialPlan,
)
from dosecalc.domain.services.vial_optimizer import ALT_MAX_RATIO, ALT_MIN_RATIO
from dosecalc.services.translator import Translator


def fmt_num(x: float, places: int = 1) -> str:
    """1.5 → '1.5', 2.0 → '2'; trailing zeros dropped after rounding to `places`."""
    s = f"{x:.{places}f}"
    return s.rstrip("0").rstrip(".") if "." in s else s


def result_title(product: Optional[Product], weight: Optional[float], tr: Translator, lang: str) -> str:
    if product is None:
        return tr.t("selectProduct", lang)
    template = tr.t(f"{product.id}DosageResultTitle", lang)
    if template == f"{product.id}DosageResultTitle":
        template = tr.t("defaultDosageResultTitle", lang)
    if "{weight}" in template:
        if weight is None:
            return tr.t("defaultDosageResultTitle", lang)
        return template.replace("{weight}", f"{weight:.1f}")
    return template


def result_subtitle(product: Optional[Product], tr: Translator, lang: str) -> str:
    if product is None:
        return ""
    key = f"{product.id}DosageResultSubtitle"
    text = tr.t(key, lang)
    return "" if text == key else text


def calculator_heading(product: Product, tr: Translator, lang: str) -> tuple[str, str]:
    return tr.t(f"{product.id}CalculatorTitle", lang), tr.t(f"{product.id}CalculatorDesc", lang)


def error_message(result: Result, product: Optional[Product], tr: Translator, lang: str) -> Optional[str]:
    """One distinct message per error kind; None for real plans."""
    if isinstance(result, OutOfRange):
        hint = "checkWeightDartepp" if (product is not None and product.is_tablet) else "checkWeight"
        return f"{tr.t('weightOutOfRange', lang)}. {tr.t(hint, lang)}"
    if isinstance(result, UnknownProduct):
        return f"{tr.t('unknownProduct', lang)}: {result.product_id}"
    if isinstance(result, InvalidInput):
        return tr.t("invalidRoute" if result.param == "route" else "invalidInput", lang)
    return None


def _units(n: float, singular: str, plural: str, tr: Translator, lang: str) -> str:
    return tr.t(singular if n == 1 else plural, lang)


def summary_lines(result: Result, tr: Translator, lang: str) -> List[str]:
    if isinstance(result, TabletPlan):
        lines = []
        for d in result.dosages:
            n = fmt_num(d.count)
            units = _units(d.count, "tablet", "tablets", tr, lang)
            lines.append(
                f"{localize(d.type, lang)} {d.specification}: {n} {units}. "
                f"{tr.t('dosageInstruction', lang)} {tr.t('takeDaily', lang)} {n} {units} {tr.t('forDays', lang)}"
            )
        lines.append(f"{tr.t('medicationInstructions', lang)} {tr.t('pleaseFollow', lang)}")
        return lines

    if not isinstance(result, VialPlan):
        return []

    ml, mg = tr.t("ml", lang), tr.t("mg", lang)
    group = tr.t("child" if result.is_child else "adult", lang)
    lines = [
        f"{tr.t('totalDose', lang)}: {fmt_num(result.total_dose_mg)} {mg} "
        f"({fmt_num(result.per_kg_rate)} {mg}/kg, {group})",
    ]
    for strength, count in result.strength_counts.items():
        lines.append(f"{strength}{mg} × {count} {_units(count, 'vial', 'vials', tr, lang)}")
    if result.combination:
        lines.append(
            f"{tr.t('optimalSelection', lang)}: "
            + " + ".join(f"{x}{mg}" for x in result.combination)
            + f" = {result.total_mg_delivered}{mg}"
        )

    if result.reconstitution_volume is not None:
        lines.append(f"{tr.t('reconstitutionVolume', lang)}: {fmt_num(result.reconstitution_volume)} {ml}")
    if result.injection_volume is not None:
        lines.append(f"{tr.t('injectionVolume', lang)}: {fmt_num(result.injection_volume)} {ml}")
    if result.bicarbonate_volume is not None:
        lines.append(f"{tr.t('bicarbonateVolume', lang)}: {fmt_num(result.bicarbonate_volume)} {ml}")
    if result.saline_volume is not None:
        lines.append(f"{tr.t('salineVolume', lang)}: {fmt_num(result.saline_volume)} {ml}")
    if result.exact_injection_volume is not None:
        lines.append(f"{tr.t('exactInjectionVolume', lang)}: {fmt_num(result.exact_injection_volume, 2)} {ml}")
    if result.rounded_injection_volume is not None:
        lines.append(f"{tr.t('roundedInjectionVolume', lang)}: {fmt_num(result.rounded_injection_volume, 2)} {ml}")

    # alternatives are listed for dual-solvent plans only, within
    # [-5%, +10%] of the target dose and in a strength not already chosen
    lo, hi = result.total_dose_mg * ALT_MIN_RATIO, result.total_dose_mg * ALT_MAX_RATIO
    alts = [
        a for a in result.alternatives
        if a.combination[0] not in result.strength_counts and lo <= a.total_mg <= hi
    ]
    if alts and result.route != "both":
        lines.append(
            f"{tr.t('alternatives', lang)}: "
            + "; ".join(f"{a.combination[0]}{mg} × {len(a.combination)}" for a in alts)
        )
    return lines
