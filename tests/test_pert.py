#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
    NetPlanner
    Copyright (C) 2025 anonimous

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see <http://www.gnu.org/licenses/>.

    Please contact with me by E-mail: shkolnick.kun@gmail.com
"""

#==============================================================================
import pytest

from netplanner import Activity
from netplanner.pert import (REJECT, REORDER, ProjectDistribution,
                             activity_quantile, check_estimates, estimate)

#==============================================================================
def test_estimate_three_point():
    mean, var = estimate(Activity('A', optimistic=1, most_likely=2, pessimistic=3))
    assert mean == pytest.approx(2.0)
    assert var == pytest.approx((2 / 6) ** 2)
    assert var == pytest.approx(0.1111, abs=1e-4)

def test_estimate_cpm():
    assert estimate(Activity('A', duration=4)) == (4.0, 0.0)

def test_estimate_does_not_change_activity():
    act = Activity('C', optimistic=1, most_likely=2, pessimistic=9)
    before = act.to_dict()
    assert estimate(act)[0] == pytest.approx(3.0)
    assert act.to_dict() == before

#==============================================================================
def test_check_reorders_estimates():
    act = Activity('X', optimistic=5, most_likely=2, pessimistic=1)
    new, warnings, errors = check_estimates(act, REORDER)

    assert errors == []
    assert warnings == ["Activity 'X' estimates must satisfy optimistic <= most_likely"
                        " <= pessimistic, got 5, 2, 1, reordered"]
    assert (new.optimistic, new.most_likely, new.pessimistic) == (1.0, 2.0, 5.0)
    # Caller's record stays as it was
    assert act.optimistic == 5.0

def test_check_rejects_estimates():
    act = Activity('X', optimistic=5, most_likely=2, pessimistic=1)
    new, warnings, errors = check_estimates(act, REJECT)

    assert new is act
    assert warnings == []
    assert len(errors) == 1

def test_check_negative_duration():
    new, warnings, errors = check_estimates(Activity('A', duration=-1))
    assert warnings == ["Activity 'A' has negative duration -1, clamped to 0"]
    assert new.duration == 0.0

    new, warnings, errors = check_estimates(Activity('A', duration=-1), REJECT)
    assert errors == ["Activity 'A' has negative duration -1"]

def test_check_good_estimates():
    act = Activity('A', optimistic=1, most_likely=1, pessimistic=1)
    assert check_estimates(act) == (act, [], [])

def test_check_unknown_policy():
    with pytest.raises(ValueError):
        check_estimates(Activity('A', duration=1), 'ignore')

#==============================================================================
def test_activity_quantile():
    # Symmetric estimate, the median is the mode
    assert activity_quantile(0.5, 1, 2, 3) == pytest.approx(2.0)
    assert activity_quantile(0.95, 1, 2, 9) > activity_quantile(0.5, 1, 2, 9)
    assert 1.0 <= activity_quantile(0.95, 1, 2, 9) <= 9.0

def test_activity_quantile_degenerate():
    assert activity_quantile(0.95, 2, 2, 2) == 2.0

#==============================================================================
def test_project_distribution():
    dist = ProjectDistribution(10.0, 4.0, 7.0, 15.0, p=0.95)

    assert dist.std == pytest.approx(2.0)
    assert dist.probability(10.0) == pytest.approx(0.5)
    assert dist.probability(14.0) == pytest.approx(0.97725, abs=1e-5)
    assert dist.quantile(0.5) == pytest.approx(10.0)
    assert dist.pqe == pytest.approx(10.0 + 2.0 * 1.6448536, abs=1e-6)

    with pytest.raises(ValueError):
        dist.quantile(1.0)

def test_deterministic_distribution():
    dist = ProjectDistribution(10.0, 0.0)

    assert dist.is_deterministic
    assert dist.probability(9.99) == 0.0
    assert dist.probability(10.0) == 1.0
    assert dist.pqe == 10.0
