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
import copy

import pytest

from netplanner import Activity, compute
from netplanner.pert import REJECT

from conftest import longest_path, random_project

#==============================================================================
def test_scenario(scenario):
    result = compute(scenario)

    assert result.ok
    assert result.warnings == []
    assert result.project_duration == 10.0
    assert result.critical_activities == ['B', 'D', 'E']
    assert result.critical_paths == [['B', 'D', 'E']]
    assert result.distribution is None

    a = result['A']
    assert (a.es, a.ef, a.ls, a.lf) == (0.0, 2.0, 1.0, 3.0)
    assert a.total_float == 1.0
    assert a.free_float == 0.0
    assert not a.is_critical
    assert result['C'].free_float == 2.0

def test_dict_input():
    records = [
        {'id': 'A', 'name': 'Design', 'duration': 2, 'owner': 'Ann'},
        {'id': 'B', 'duration': 3, 'predecessors': 'A'},
    ]
    before = copy.deepcopy(records)
    result = compute(records)

    assert records == before
    assert result.project_duration == 5.0
    assert result['A'].name == 'Design'
    assert result['A'].data == {'owner': 'Ann'}

def test_mapping_input():
    result = compute({'A': {'duration': 2}, 'B': {'duration': 3, 'preds': ['A']}})
    assert result.ok
    assert [a.id for a in result.activities] == ['A', 'B']
    assert result.project_duration == 5.0

def test_bad_records():
    result = compute([{'id': 'A'}, {'duration': 1}, 42])

    assert not result.ok
    assert result.errors == [
        "Record 1: Activity 'A' has no duration data",
        "Record 2: Activity record has no 'id' field: {'duration': 1}",
        "Record 3: unsupported activity record type int",
    ]

def test_records_with_wrong_field_types():
    result = compute([
        {'id': 'A', 'duration': 1, 'predecessors': 5},
        {'id': 'B', 'duration': 1, 'data': 5},
        {'id': 'C', 'duration': 1, 'predecessors': {'A': 1}},
    ])

    assert not result.ok
    assert result.project_duration is None
    assert result.errors == [
        "Record 1: Activity 'A': predecessors must be a string or a list of identifiers, got 5",
        "Record 2: Activity record 'data' field must be a dictionary, got 5",
        "Record 3: Activity 'C': predecessors must be a string or a list of identifiers, got {'A': 1}",
    ]

def test_cycle_result():
    result = compute([
        Activity('A', duration=1, predecessors='B'),
        Activity('B', duration=1, predecessors='A'),
    ])

    assert not result.ok
    assert result.errors == ["Cycle detected: A -> B -> A"]
    assert result.project_duration is None
    assert result.activities == []
    assert result.critical_paths == []
    assert result.network is None

    activities_df, events_df = result.to_dataframe()
    assert activities_df.empty and events_df.empty

    with pytest.raises(ValueError):
        result.viz()

def test_empty():
    result = compute([])

    assert result.ok
    assert result.warnings == ["No activities to schedule"]
    assert result.project_duration == 0.0
    assert result.critical_paths == []
    assert len(result.network.events) == 1

def test_warnings_do_not_stop_computation():
    result = compute([
        Activity('A', duration=1),
        Activity('B', duration=1, predecessors='A'),
        Activity('C', optimistic=4, most_likely=2, pessimistic=1, predecessors='A;B'),
    ])

    assert result.ok
    assert len(result.warnings) == 2
    assert result['C'].activity.optimistic == 1.0
    assert result.project_duration == pytest.approx(2.0 + (1 + 8 + 4) / 6)

def test_reject_policy():
    result = compute([Activity('A', optimistic=4, most_likely=2, pessimistic=1)],
                     estimate_policy=REJECT)
    assert not result.ok
    assert result.project_duration is None

@pytest.mark.parametrize('kwargs', [
    {'p': 1.0},
    {'p': 0.0},
    {'epsilon': 0.0},
    {'estimate_policy': 'swap'},
])
def test_bad_config(kwargs):
    with pytest.raises(ValueError):
        compute([Activity('A', duration=1)], **kwargs)

#==============================================================================
def test_pert(pert_chain):
    result = compute(pert_chain)

    assert result.is_pert
    assert result.project_duration == pytest.approx(6.0)

    a, b = result['A'], result['B']
    assert a.expected_duration == pytest.approx(2.0)
    assert a.variance == pytest.approx(1 / 9)
    assert b.es_var == pytest.approx(1 / 9)
    assert b.ef_var == pytest.approx(5 / 9)
    assert a.duration_pqe > a.expected_duration

    dist = result.distribution
    assert dist.mean == pytest.approx(6.0)
    assert dist.variance == pytest.approx(5 / 9)
    assert dist.optimistic == pytest.approx(3.0)
    assert dist.pessimistic == pytest.approx(9.0)
    assert dist.probability(6.0) == pytest.approx(0.5)
    assert dist.pqe > 6.0

def test_pert_variance_on_tied_paths():
    result = compute([
        Activity('A', optimistic=1, most_likely=2, pessimistic=3),
        Activity('B', optimistic=0, most_likely=2, pessimistic=4),
        Activity('C', optimistic=1, most_likely=1, pessimistic=1, predecessors='A;B'),
    ])

    assert result.critical_paths == [['A', 'C'], ['B', 'C']]
    # The project takes the largest variance of the paths finishing it
    assert result.distribution.variance == pytest.approx(4 / 9)
    assert result.distribution.variance == pytest.approx(
        max(cp.variance for cp in result.critical_paths))

def test_pert_import_row():
    result = compute([
        Activity('A', duration=1),
        Activity('C', name='Task C', optimistic=1, most_likely=2, pessimistic=9, predecessors=['A']),
    ])
    c = result['C']
    assert c.expected_duration == pytest.approx(3.0)
    assert c.predecessors == ('A',)
    # CPM activities in a PERT model are deterministic
    assert result['A'].duration_pqe == 1.0
    assert result['A'].variance == 0.0

def test_to_dict(pert_chain):
    result = compute(pert_chain, debug=True)
    d = result.to_dict()

    assert d['ok']
    assert d['critical_paths'] == [['A', 'B']]
    assert d['distribution']['mean'] == pytest.approx(6.0)

    act = d['activities'][1]
    assert act['predecessors'] == ['A']
    assert act['variance'] == pytest.approx(4 / 9)
    assert 'duration_pqe' in act
    assert 'tolerance' in act
    assert len(d['network']['arcs']) == 2

def test_to_dict_cpm(scenario):
    act = compute(scenario).to_dict()['activities'][0]
    assert 'variance' not in act
    assert 'tolerance' not in act

def test_to_dataframe(scenario):
    scenario[0] = Activity('A', duration=2, data={'owner': 'Ann'})
    activities_df, events_df = compute(scenario).to_dataframe()

    assert list(activities_df['id']) == ['A', 'B', 'C', 'D', 'E']
    assert list(activities_df['critical']) == [False, True, False, True, True]
    assert activities_df.loc[3, 'predecessors'] == 'A;B'
    assert activities_df.loc[0, 'owner'] == 'Ann'
    assert activities_df.loc[1, 'owner'] == ''
    assert len(events_df) == 5

#==============================================================================
@pytest.mark.parametrize('seed', range(10))
def test_random_projects(seed):
    dag, acts = random_project(60, 0.08, seed)
    result = compute(acts)

    assert result.ok
    assert result.project_duration == longest_path(dag, acts)

    critical = set(result.critical_activities)
    on_paths = set()
    for cp in result.critical_paths:
        assert cp.duration == result.project_duration
        on_paths.update(cp)
    assert on_paths == critical

    for a in result.activities:
        assert a.es <= a.ef <= result.project_duration
        assert a.ls <= a.lf
        assert a.total_float >= 0.0
        assert a.is_critical == (a.total_float == 0.0)

def test_idempotent():
    dag, acts = random_project(60, 0.08, 3, fractional=True)
    assert compute(acts).to_dict() == compute(acts).to_dict()
