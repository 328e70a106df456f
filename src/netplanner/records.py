#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Record exchange format
======================

Comma separated activity records, the first line is a header. The header
width selects the record kind for the whole document: 5-6 columns for PERT,
3-4 columns for CPM. Predecessor identifiers are joined with ``;`` inside
their field.

PERT rows::

    id,name,optimistic,most_likely,pessimistic[,predecessors]

CPM rows::

    id,name,duration[,predecessors]

Rows which can not be converted to activities are skipped and reported,
importing never starts a schedule computation.
"""

#==============================================================================
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
from io import StringIO
import logging

import pandas as pd

from .activity import PRED_SEP, Activity
from .errors import RecordFormatError

logger = logging.getLogger(__name__)

SEP = ','

PERT_WIDTH = (5, 6)
CPM_WIDTH  = (3, 4)

COLUMNS = ['id', 'name', 'optimistic', 'most_likely', 'pessimistic', 'duration',
           'predecessors', 'es', 'ef', 'ls', 'lf', 'total_float', 'free_float',
           'critical']

#==============================================================================
class RecordError:
    """
    Problem with one import row.

    Attributes
    ----------
    line : int
        Line number in the document, starting from 1
    message : str
        What is wrong with the row
    """

    def __init__(self, line, message):
        self.line    = line
        self.message = message

    def __eq__(self, other):
        if not isinstance(other, RecordError):
            return NotImplemented
        return (self.line, self.message) == (other.line, other.message)

    __hash__ = None

    def __str__(self):
        return f"line {self.line}: {self.message}"

    def __repr__(self):
        return f"RecordError({self.line!r}, {self.message!r})"

#==============================================================================
class ImportResult:
    """
    Result of a record import.

    Attributes
    ----------
    activities : list
        Parsed :class:`netplanner.activity.Activity` objects in row order
    errors : list
        :class:`RecordError` objects for skipped rows
    """

    def __init__(self, activities=None, errors=None):
        self.activities = activities if activities is not None else []
        self.errors     = errors if errors is not None else []

    @property
    def skipped(self):
        """Number of skipped rows."""
        return len(self.errors)

    @property
    def ok(self):
        return not self.errors

    def __repr__(self):
        return f"ImportResult({len(self.activities)} activities, {self.skipped} skipped)"

#==============================================================================
def _cell(value):
    if value is None or pd.isna(value):
        return ''
    return str(value).strip()

def _trim(fields):
    while fields and not fields[-1]:
        fields.pop()
    return fields

def _is_pert(header):
    n = len(_trim([f.strip() for f in header.split(SEP)]))
    if n in PERT_WIDTH:
        return True
    if n in CPM_WIDTH:
        return False
    raise RecordFormatError(f"Header must have 3-4 (CPM) or 5-6 (PERT) columns, got {n}")

def _row_activity(fields, is_pert):
    """Convert row fields to an Activity, raise ValueError on bad data."""
    n = len(fields)
    if is_pert:
        if n not in PERT_WIDTH:
            raise ValueError(f"Expected 5 or 6 fields, got {n}")
        return Activity(fields[0], name=fields[1] or None,
                        optimistic=fields[2], most_likely=fields[3],
                        pessimistic=fields[4],
                        predecessors=fields[5] if 6 == n else None)

    if n not in CPM_WIDTH:
        raise ValueError(f"Expected 3 or 4 fields, got {n}")
    return Activity(fields[0], name=fields[1] or None,
                    duration=fields[2],
                    predecessors=fields[3] if 4 == n else None)

#==============================================================================
def parse_records(text):
    """
    Parse activity records.

    Parameters
    ----------
    text : str
        Record document, the first line is a header

    Returns
    -------
    ImportResult
        Parsed activities and skipped rows

    Raises
    ------
    RecordFormatError
        If the document has no header line or the header width matches
        neither record kind.

    Notes
    -----
    Blank lines are ignored. Trailing empty fields do not count, so
    ``A,Task A,3,`` is a CPM row without predecessors. Rows which do not
    match the header kind are skipped.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise RecordFormatError("Record document has no header line")

    is_pert = _is_pert(lines[0])

    ret = ImportResult()
    if not any(line.strip() for line in lines[1:]):
        return ret

    # Enough columns for the widest row
    width = max(line.count(SEP) for line in lines) + 1

    df = pd.read_csv(StringIO(text), sep=SEP, header=None, names=list(range(width)),
                     skiprows=1, dtype=str, keep_default_na=False,
                     skip_blank_lines=False, engine='python')

    for k, row in enumerate(df.itertuples(index=False, name=None)):
        line = k + 2

        fields = _trim([_cell(v) for v in row])
        if not fields:
            continue

        try:
            ret.activities.append(_row_activity(fields, is_pert))
        except ValueError as e:
            ret.errors.append(RecordError(line, str(e)))
            logger.warning("Skipped record at line %d: %s", line, e)

    logger.debug("Imported %d activities, skipped %d records",
                 len(ret.activities), ret.skipped)

    return ret

#==============================================================================
def read_records(path):
    """
    Read activity records from a file.

    See :func:`parse_records`.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return parse_records(f.read())

#==============================================================================
def export_records(result, path=None):
    """
    Export a schedule result as records.

    Parameters
    ----------
    result : ScheduleResult
        Computed schedule
    path : str, optional
        File to write. Nothing is written when None.

    Returns
    -------
    str
        Record document, input fields followed by the computed ones. PERT
        results have an extra ``variance`` column after ``duration``.

    Raises
    ------
    ValueError
        If the result has errors, its numeric fields are not trustworthy.
    """
    if result.errors:
        raise ValueError("Can not export a result with errors")

    columns = list(COLUMNS)
    if result.is_pert:
        columns.insert(columns.index('duration') + 1, 'variance')

    rows = []
    for a in result.activities:
        act = a.activity
        rows.append({
            'id'          : act.id,
            'name'        : act.name,
            'optimistic'  : act.optimistic,
            'most_likely' : act.most_likely,
            'pessimistic' : act.pessimistic,
            'duration'    : a.duration,
            'variance'    : a.variance,
            'predecessors': PRED_SEP.join(act.predecessors),
            'es'          : a.es,
            'ef'          : a.ef,
            'ls'          : a.ls,
            'lf'          : a.lf,
            'total_float' : a.total_float,
            'free_float'  : a.free_float,
            'critical'    : a.is_critical,
        })

    text = pd.DataFrame(rows, columns=columns).to_csv(index=False, lineterminator='\n')

    if path is not None:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)

    return text
