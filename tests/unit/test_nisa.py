"""Unit tests for NISA compound growth projection"""

import pytest
from yen_tracker.domain.nisa import calculate_nisa_projection


def test_zero_return_value_equals_contributions():
    projection = calculate_nisa_projection(100000, 0, 1)

    assert projection.total_contributed == 1200000
    assert projection.total_value == 1200000
    assert projection.total_growth == 0
    assert projection.growth_pct == 0
    assert len(projection.years) == 1
    assert projection.years[0].contributed == 1200000
    assert projection.years[0].value == 1200000
    assert projection.years[0].growth == 0


def test_contribution_added_after_monthly_growth():
    # 12% a year = 1% a month; 100000 * (1.01^12 - 1) / 0.01 = 1,268,250.30
    projection = calculate_nisa_projection(100000, 12, 1)

    assert projection.total_value == 1268250
    assert projection.total_growth == 68250
    assert projection.growth_pct == pytest.approx(68250 / 1200000 * 100)


def test_one_snapshot_per_year_with_growing_contributions():
    projection = calculate_nisa_projection(50000, 5, 5)

    assert [y.year for y in projection.years] == [1, 2, 3, 4, 5]
    contributed = [y.contributed for y in projection.years]
    assert contributed == [600000, 1200000, 1800000, 2400000, 3000000]
    assert all(y.value == y.contributed + y.growth for y in projection.years)
    assert projection.total_value == projection.years[-1].value


def test_no_contributions():
    projection = calculate_nisa_projection(0, 5, 3)

    assert projection.total_contributed == 0
    assert projection.total_value == 0
    assert projection.growth_pct == 0


def test_zero_years():
    projection = calculate_nisa_projection(100000, 5, 0)

    assert projection.years == []
    assert projection.total_contributed == 0
    assert projection.total_value == 0
