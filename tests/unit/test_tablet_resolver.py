from dosecalc.domain.catalog import get_product
from dosecalc.domain.services.tablet_resolver import TabletRangeResolver, first_matching_range

DARTEPP = get_product("dartepp")
resolver = TabletRangeResolver()


def _lines(weight):
    plan = resolver.resolve(weight, DARTEPP)
    return None if plan is None else [(d.type["en"], d.specification, d.count) for d in plan.dosages]


def test_lowest_band():
    assert _lines(5) == [("D-ARTEPP Dispersible", "20mg/120mg", 1)]


def test_band_max_belongs_to_next_range():
    # 8 is the max of [5,8) for 20mg and the min of [8,11) for 30mg
    assert _lines(8) == [("D-ARTEPP Dispersible", "30mg/180mg", 1)]
    assert _lines(7.99) == [("D-ARTEPP Dispersible", "20mg/120mg", 1)]
    assert ("D-ARTEPP Dispersible", "20mg/120mg", 6) in _lines(36)


def test_overlapping_specifications_all_returned():
    assert _lines(20) == [
        ("D-ARTEPP Dispersible", "20mg/120mg", 3),
        ("D-ARTEPP Dispersible", "30mg/180mg", 2),
        ("D-ARTEPP", "40mg/240mg", 1.5),
        ("D-ARTEPP", "60mg/360mg", 1),
    ]
    assert len(_lines(40)) == 6


def test_fractional_counts_kept():
    lines = _lines(99.9)
    assert ("D-ARTEPP", "80mg/480mg", 2.5) in lines
    assert ("D-ARTEPP", "40mg/240mg", 5) in lines


def test_out_of_domain_and_uncovered():
    assert resolver.resolve(4.9, DARTEPP) is None
    assert resolver.resolve(100.1, DARTEPP) is None
    # every band is [x, 100)
    assert resolver.resolve(100, DARTEPP) is None


def test_non_tablet_product_is_ignored():
    assert resolver.resolve(35, get_product("argesun")) is None


def test_first_matching_range_never_returns_band_at_its_max():
    for ttype in DARTEPP.scheme.types:
        for spec in ttype.specifications:
            for band in spec.weight_ranges:
                assert first_matching_range(spec, band.min) is band
                assert first_matching_range(spec, band.max) is not band
