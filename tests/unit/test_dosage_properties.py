from hypothesis import given, strategies as st

from dosecalc.application.engine import DosageEngine
from dosecalc.domain.catalog import get_product
from dosecalc.domain.models import Route
from dosecalc.domain.plans import OutOfRange, TabletPlan, VialPlan
from dosecalc.domain.services.vial_optimizer import (
    MIN_DELIVERED_RATIO, greedy_combination, round_injection_volume,
)

engine = DosageEngine()

tablet_weights = st.floats(min_value=5, max_value=100, exclude_max=True, allow_nan=False)
vial_weights = st.floats(min_value=0, max_value=100, allow_nan=False)
child_weights = st.floats(min_value=0, max_value=20, exclude_max=True, allow_nan=False)
adult_weights = st.floats(min_value=20, max_value=100, allow_nan=False)
routes = st.sampled_from([Route.IV, Route.IM])


@given(tablet_weights)
def test_every_tablet_weight_has_a_line(w):
    res = engine.compute(w, "dartepp")
    assert isinstance(res, TabletPlan)
    assert len(res.dosages) >= 1
    assert all(d.count > 0 for d in res.dosages)


@given(st.one_of(
    st.floats(max_value=5, exclude_max=True, allow_nan=False, allow_infinity=False),
    st.floats(min_value=100, exclude_min=True, allow_nan=False, allow_infinity=False),
))
def test_tablet_outside_domain(w):
    res = engine.compute(w, "dartepp")
    assert isinstance(res, OutOfRange)
    assert (res.min_weight, res.max_weight) == (5, 100)


@given(vial_weights)
def test_greedy_never_underdoses(w):
    dose = w * get_product("argesun").scheme.formula.rate_for(w)
    for denominations in ([180, 120, 60, 30], [120, 60, 30]):
        assert sum(greedy_combination(dose, denominations)) >= dose


@given(vial_weights, st.sampled_from(["argesun", "artesun"]))
def test_chosen_combination_is_greedy_or_smaller(w, product_id):
    plan = engine.compute(w, product_id, "iv")
    assert isinstance(plan, VialPlan)
    denominations = [s.mg for s in get_product(product_id).scheme.strengths_desc()]
    greedy = greedy_combination(plan.total_dose_mg, denominations)
    if list(plan.combination) != greedy:
        assert len(plan.combination) < len(greedy)
        assert plan.total_mg_delivered >= plan.total_dose_mg * MIN_DELIVERED_RATIO
    assert sum(plan.combination) == plan.total_mg_delivered
    assert sum(plan.strength_counts.values()) == plan.unit_count


@given(child_weights, st.sampled_from(["argesun", "artesun"]))
def test_child_rate(w, product_id):
    plan = engine.compute(w, product_id, "im")
    assert plan.is_child and plan.per_kg_rate == 3.0


@given(adult_weights, st.sampled_from(["argesun", "artesun"]))
def test_adult_rate(w, product_id):
    plan = engine.compute(w, product_id, "im")
    assert not plan.is_child and plan.per_kg_rate == 2.4


@given(st.floats(min_value=0, max_value=50, allow_nan=False), routes, st.booleans())
def test_rounding_is_idempotent_and_never_lowers(x, route, child):
    once = round_injection_volume(x, route, child)
    assert round_injection_volume(once, route, child) == once
    assert once >= x - 0.0051


@given(vial_weights, routes)
def test_artesun_rounded_volume_floor(w, route):
    plan = engine.compute(w, "artesun", route.value)
    floors = {(Route.IV, True): 2.0, (Route.IV, False): 7.0,
              (Route.IM, True): 1.0, (Route.IM, False): 4.0}
    assert plan.rounded_injection_volume >= floors[(route, plan.is_child)]
    assert plan.rounded_injection_volume >= plan.exact_injection_volume - 0.005
