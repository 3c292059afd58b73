import pytest

from dosecalc.domain.catalog import get_product
from dosecalc.domain.models import Route
from dosecalc.domain.services.vial_optimizer import (
    VialCombinationOptimizer, choose_combination, consolidate, greedy_combination,
    round_injection_volume, to_fixed,
)

ARGESUN = get_product("argesun")
ARTESUN = get_product("artesun")
ARGESUN_MG = [180, 120, 60, 30]
ARTESUN_MG = [120, 60, 30]
opt = VialCombinationOptimizer()


# ── greedy / consolidation ───────────────────────────────────────
def test_greedy_tops_up_with_smallest_vial():
    assert greedy_combination(84, ARGESUN_MG) == [60, 30]
    assert greedy_combination(45, ARGESUN_MG) == [30, 30]
    assert greedy_combination(240, ARGESUN_MG) == [180, 60]
    assert greedy_combination(240, ARTESUN_MG) == [120, 120]
    assert greedy_combination(0, ARGESUN_MG) == []


def test_consolidation_two_smallest_into_next():
    assert consolidate([30, 30], ARGESUN_MG) == [60]
    assert consolidate([60, 30], ARGESUN_MG) is None
    assert choose_combination(45, ARGESUN_MG) == ([60], 60)


def test_consolidation_is_single_pass():
    # [60, 30, 30] -> [60, 60]; the resulting pair of 60s is not merged again
    assert greedy_combination(96, ARTESUN_MG) == [60, 30, 30]
    assert choose_combination(96, ARTESUN_MG) == ([60, 60], 120)


def test_four_smallest_vials_fold_into_next_denomination():
    # greedy gives four 30s; the 4x-smallest rule folds them into one 120
    combo, total = choose_combination(100, [120, 30])
    assert total >= 100 * 0.95
    assert combo == [120]


# ── rounding helpers ─────────────────────────────────────────────
def test_to_fixed_matches_half_up_on_binary_value():
    assert to_fixed(4.8, 2) == 4.8
    assert to_fixed(2.25, 1) == 2.3
    assert to_fixed(1.005, 2) == 1.0  # 1.005 is stored as 1.00499...


@pytest.mark.parametrize("exact,route,child,expected", [
    (1.5, Route.IV, True, 2.0),
    (2.0, Route.IV, True, 2.0),
    (2.01, Route.IV, True, 2.01),
    (4.8, Route.IV, False, 7.0),
    (7.0, Route.IV, False, 7.0),
    (7.5, Route.IV, False, 7.5),
    (0.75, Route.IM, True, 1.0),
    (1.0, Route.IM, True, 1.0),
    (2.4, Route.IM, False, 4.0),
    (4.01, Route.IM, False, 4.01),
])
def test_round_injection_volume(exact, route, child, expected):
    assert round_injection_volume(exact, route, child) == expected


# ── single solvent (Argesun) ─────────────────────────────────────
def test_argesun_adult_35kg():
    plan = opt.resolve(35, ARGESUN)
    assert plan.total_dose_mg == pytest.approx(84)
    assert plan.per_kg_rate == 2.4 and plan.is_child is False
    assert plan.combination == (60, 30)
    assert plan.strength_counts == {60: 1, 30: 1}
    assert plan.total_mg_delivered == 90
    assert plan.reconstitution_volume == pytest.approx(4.5)
    assert plan.injection_volume == pytest.approx(4.2)
    assert plan.concentration == 20
    assert plan.route == "both"
    assert [a.combination for a in plan.alternatives] == [(30, 30, 30)]


def test_argesun_child_consolidated():
    plan = opt.resolve(15, ARGESUN)
    assert plan.is_child and plan.per_kg_rate == 3.0
    assert plan.combination == (60,)
    assert plan.reconstitution_volume == pytest.approx(3.0)
    assert plan.injection_volume == pytest.approx(2.25)


def test_argesun_weight_zero_and_bounds():
    plan = opt.resolve(0, ARGESUN)
    assert plan.combination == () and plan.total_mg_delivered == 0
    assert plan.alternatives == ()
    assert opt.resolve(100.5, ARGESUN) is None
    assert opt.resolve(-1, ARGESUN) is None


# ── dual solvent (Artesun) ───────────────────────────────────────
def test_artesun_20kg_iv():
    plan = opt.resolve(20, ARTESUN, Route.IV)
    assert plan.is_child is False
    assert plan.total_dose_mg == pytest.approx(48)
    assert plan.combination == (60,)
    assert plan.bicarbonate_volume == 1.0
    assert plan.saline_volume == 5.0
    assert plan.concentration == 10
    assert plan.exact_injection_volume == 4.8
    assert plan.rounded_injection_volume == 7.0
    assert plan.route == "iv"


def test_artesun_20kg_im():
    plan = opt.resolve(20, ARTESUN, Route.IM)
    assert plan.saline_volume == 2.0
    assert plan.concentration == 20
    assert plan.exact_injection_volume == 2.4
    assert plan.rounded_injection_volume == 4.0


def test_artesun_child_floors():
    iv = opt.resolve(5, ARTESUN, Route.IV)
    assert iv.combination == (30,)
    assert iv.exact_injection_volume == 1.5
    assert iv.rounded_injection_volume == 2.0
    im = opt.resolve(5, ARTESUN, Route.IM)
    assert im.rounded_injection_volume == 1.0


def test_artesun_large_volume_kept():
    plan = opt.resolve(60, ARTESUN, Route.IV)
    assert plan.combination == (120, 30)
    assert plan.bicarbonate_volume == 2.5
    assert plan.saline_volume == 12.5
    assert plan.exact_injection_volume == 14.4
    assert plan.rounded_injection_volume == 14.4


def test_artesun_route_accepts_plain_string_and_rejects_unknown():
    assert opt.resolve(20, ARTESUN, "im").route == "im"
    assert opt.resolve(20, ARTESUN, "sc") is None
    assert opt.resolve(20, ARTESUN, None) is None


def test_child_adult_boundary():
    assert opt.resolve(19.99, ARGESUN).per_kg_rate == 3.0
    assert opt.resolve(20, ARGESUN).per_kg_rate == 2.4
