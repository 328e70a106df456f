#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
NetPlanner - Critical Path Method and PERT analysis library
===========================================================

    >>> from netplanner import compute
    >>> result = compute([{'id': 'A', 'duration': 3},
    ...                   {'id': 'B', 'duration': 2, 'predecessors': ['A']}])
    >>> result.critical_paths
    [A -> B]
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
from .activity import Activity
from .errors import NetPlannerError, NetworkError, RecordFormatError
from .floats import EPSILON
from .net_model import ComputedActivity, ScheduleResult, compute
from .records import ImportResult, RecordError, export_records, parse_records, read_records

__version__ = '0.1.0'

__all__ = [
    'Activity',
    'ComputedActivity',
    'EPSILON',
    'ImportResult',
    'NetPlannerError',
    'NetworkError',
    'RecordError',
    'RecordFormatError',
    'ScheduleResult',
    'compute',
    'export_records',
    'parse_records',
    'read_records',
]
