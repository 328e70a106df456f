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

from netplanner import (RecordError, RecordFormatError, compute, export_records,
                        parse_records, read_records)
from netplanner.pert import estimate

PERT_DOC = """ID,Name,Optimistic,Most Likely,Pessimistic,Predecessors
A,Task A,1,2,3,
B,Task B,2,4,6,A
C,Task C,1,2,9,A
D,Task D,1,1,1,B;C
"""

#==============================================================================
def test_pert_records():
    imported = parse_records(PERT_DOC)

    assert imported.ok
    assert imported.skipped == 0
    assert [a.id for a in imported.activities] == ['A', 'B', 'C', 'D']

    c = imported.activities[2]
    assert c.name == 'Task C'
    assert (c.optimistic, c.most_likely, c.pessimistic) == (1.0, 2.0, 9.0)
    assert list(c.predecessors) == ['A']
    assert estimate(c)[0] == pytest.approx(3.0)

    assert imported.activities[0].predecessors == ()
    assert imported.activities[3].predecessors == ('B', 'C')

def test_cpm_records():
    imported = parse_records("id,name,duration,predecessors\n"
                             "A,Design,3\n"
                             "\n"
                             "B,Build,5,A\n")
    assert imported.ok
    a, b = imported.activities
    assert (a.duration, b.duration) == (3.0, 5.0)
    assert b.predecessors == ('A',)
    assert not b.is_pert

def test_bad_rows_are_skipped():
    imported = parse_records("ID,Name,Optimistic,Most Likely,Pessimistic,Predecessors\n"
                             "A,Task A,1,2,3\n"
                             "B,Task B,x,4,6,A\n"
                             ",Nameless,1,2,3\n"
                             "C\n"
                             "D,Task D,1,2,3,A,extra\n"
                             "E,Task E,1,2\n")

    assert [a.id for a in imported.activities] == ['A']
    assert imported.skipped == 5
    assert [e.line for e in imported.errors] == [3, 4, 5, 6, 7]
    assert imported.errors[2] == RecordError(5, "Expected 5 or 6 fields, got 1")
    assert str(imported.errors[2]) == "line 5: Expected 5 or 6 fields, got 1"
    # A PERT row without its pessimistic estimate is not read as a CPM row
    assert imported.errors[4] == RecordError(7, "Expected 5 or 6 fields, got 4")

def test_rows_must_match_header_kind():
    imported = parse_records("id,name,duration,predecessors\n"
                             "A,Design,3\n"
                             "B,Build,1,2,9,A\n")

    assert [a.id for a in imported.activities] == ['A']
    assert imported.errors == [RecordError(3, "Expected 3 or 4 fields, got 6")]

def test_bad_header_width():
    with pytest.raises(RecordFormatError):
        parse_records("id,name\nA,Design\n")

    with pytest.raises(RecordFormatError):
        parse_records("a,b,c,d,e,f,g\nA,Task A,1,2,3,,\n")

def test_import_does_not_compute():
    imported = parse_records("id,name,duration,predecessors\nA,A,1,B\nB,B,1,A\n")
    # Cyclic data is imported as is, errors appear only on compute
    assert imported.ok
    assert not compute(imported.activities).ok

def test_header_only():
    imported = parse_records("id,name,duration\n")
    assert imported.activities == []
    assert imported.skipped == 0

def test_no_header():
    with pytest.raises(RecordFormatError):
        parse_records("")

    with pytest.raises(ValueError):
        parse_records("\nA,A,1\n")

def test_read_records(tmp_path):
    path = tmp_path / 'project.csv'
    path.write_text(PERT_DOC, encoding='utf-8')

    imported = read_records(str(path))
    assert len(imported.activities) == 4

#==============================================================================
def test_export_pert(tmp_path):
    result = compute(parse_records(PERT_DOC).activities)
    path = tmp_path / 'result.csv'
    text = export_records(result, str(path))

    lines = text.splitlines()
    assert lines[0] == ('id,name,optimistic,most_likely,pessimistic,duration,variance,'
                        'predecessors,es,ef,ls,lf,total_float,free_float,critical')
    assert len(lines) == 5
    assert lines[4].startswith('D,Task D,1.0,1.0,1.0,1.0,0.0,B;C,')
    assert lines[4].endswith(',True')
    assert path.read_text(encoding='utf-8') == text

def test_export_cpm(scenario):
    text = export_records(compute(scenario))
    lines = text.splitlines()

    assert 'variance' not in lines[0]
    assert lines[1] == 'A,A,,,,2.0,,0.0,2.0,1.0,3.0,1.0,0.0,False'
    assert lines[4] == 'D,D,,,,4.0,A;B,3.0,7.0,3.0,7.0,0.0,0.0,True'

def test_export_with_errors():
    result = compute([{'id': 'A', 'duration': 1, 'predecessors': 'A'}])
    with pytest.raises(ValueError):
        export_records(result)
