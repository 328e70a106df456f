#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity records
================

An :class:`Activity` is the input unit of the scheduler: an identifier,
a display name, a set of predecessor identifiers and duration data in one of
two forms:

- a single ``duration`` (CPM);
- a three-point estimate ``optimistic``, ``most_likely``, ``pessimistic`` (PERT).

Records are treated as values: the scheduler never changes an activity it was
given, it builds a modified copy with :meth:`Activity.replace` instead.
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
import numpy as np

# Secondary delimiter for predecessor lists given as text
PRED_SEP = ';'

# Alternative spellings accepted by Activity.from_dict
_ALIASES = {
    'mostLikely' : 'most_likely',
    'most-likely': 'most_likely',
    'preds'      : 'predecessors',
}

_KNOWN = ('id', 'name', 'predecessors', 'duration',
          'optimistic', 'most_likely', 'pessimistic', 'data')

#==============================================================================
def _to_float(value, field, act_id):
    if isinstance(value, bool):
        raise ValueError(f"Activity '{act_id}': {field} must be a number, got {value!r}")
    try:
        ret = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Activity '{act_id}': {field} must be a number, got {value!r}") from None

    if not np.isfinite(ret):
        raise ValueError(f"Activity '{act_id}': {field} must be finite, got {value!r}")
    return ret

#==============================================================================
def parse_predecessors(value, act_id=None):
    """
    Normalize predecessor data to a tuple of identifiers.

    Parameters
    ----------
    value : None, str or iterable
        ``None``, a ``;``-joined string or an iterable of identifiers
    act_id : str, optional
        Owner activity identifier for error messages

    Returns
    -------
    tuple
        Identifiers in the given order. Duplicates are kept, the graph
        builder reports them.

    Raises
    ------
    ValueError
        If ``value`` is neither a string nor an iterable.
    """
    if value is None:
        return ()

    if isinstance(value, str):
        value = value.split(PRED_SEP)
    elif isinstance(value, (dict, bytes)) or not hasattr(value, '__iter__'):
        owner = f"Activity '{act_id}': " if act_id else ''
        raise ValueError(f"{owner}predecessors must be a string or a list of identifiers, got {value!r}")

    ret = []
    for p in value:
        if p is None:
            continue
        p = str(p).strip()
        if p:
            ret.append(p)
    return tuple(ret)

#==============================================================================
class Activity:
    """
    Project activity (input record).

    Parameters
    ----------
    id : str
        Unique activity identifier, surrounding whitespace is stripped
    name : str, optional
        Display name, defaults to the identifier
    predecessors : str or iterable, optional
        Predecessor identifiers, see :func:`parse_predecessors`
    duration : float, optional
        Single duration estimate (CPM)
    optimistic, most_likely, pessimistic : float, optional
        Three-point estimate (PERT). When all three are present they take
        precedence over ``duration``.
    data : dict, optional
        Any additional user data, carried through to the results

    Raises
    ------
    ValueError
        If the identifier is empty, the duration data is missing or
        incomplete, an estimate is not a finite number, or predecessors
        and data have wrong types.

    Notes
    -----
    Range checks (negative durations, ``optimistic <= most_likely <=
    pessimistic``) are not done here, they are reported by
    :func:`netplanner.pert.check_estimates` as warnings or errors according
    to the chosen policy.
    """

    def __init__(self, id, name=None, predecessors=None, duration=None,
                 optimistic=None, most_likely=None, pessimistic=None, data=None):
        act_id = '' if id is None else str(id).strip()
        if not act_id:
            raise ValueError("Activity id must be a non-empty string")

        self.id = act_id
        self.name = act_id if name is None else str(name).strip()
        self.predecessors = parse_predecessors(predecessors, act_id)

        three = (optimistic, most_likely, pessimistic)
        n_given = sum(v is not None for v in three)
        if 0 < n_given < 3:
            raise ValueError(f"Activity '{act_id}': three-point estimate needs "
                             "optimistic, most_likely and pessimistic values")

        if 3 == n_given:
            self.optimistic  = _to_float(optimistic,  'optimistic',  act_id)
            self.most_likely = _to_float(most_likely, 'most_likely', act_id)
            self.pessimistic = _to_float(pessimistic, 'pessimistic', act_id)
        else:
            if duration is None:
                raise ValueError(f"Activity '{act_id}' has no duration data")
            self.optimistic = self.most_likely = self.pessimistic = None

        self.duration = None if duration is None else _to_float(duration, 'duration', act_id)
        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Activity '{act_id}': data must be a dictionary, got {data!r}")
        self.data = dict(data) if data else {}

    @property
    def is_pert(self):
        """True when the activity carries a three-point estimate."""
        return self.optimistic is not None

    @classmethod
    def from_dict(cls, record):
        """
        Create an activity from a loosely typed mapping.

        Accepts ``mostLikely`` and ``preds`` spellings. Keys that are not
        activity fields are collected into :attr:`data`.
        """
        fields = {}
        data = record.get('data') or {}
        if not isinstance(data, dict):
            raise ValueError(f"Activity record 'data' field must be a dictionary, got {data!r}")
        data = dict(data)
        for k, v in record.items():
            k = _ALIASES.get(k, k)
            if k == 'data':
                continue
            if k in _KNOWN:
                fields[k] = v
            else:
                data[k] = v

        if 'id' not in fields:
            raise ValueError(f"Activity record has no 'id' field: {dict(record)!r}")

        return cls(data=data, **fields)

    def replace(self, **changes):
        """Return a copy of the activity with some fields replaced."""
        fields = self.to_dict()
        fields.update(changes)
        return Activity(**fields)

    def to_dict(self):
        """
        Convert activity to dictionary representation.

        Returns
        -------
        dict
            Activity fields, ``predecessors`` as a list and a copy of ``data``
        """
        return {
            'id'          : self.id,
            'name'        : self.name,
            'predecessors': list(self.predecessors),
            'duration'    : self.duration,
            'optimistic'  : self.optimistic,
            'most_likely' : self.most_likely,
            'pessimistic' : self.pessimistic,
            'data'        : self.data.copy(),
        }

    def __eq__(self, other):
        if not isinstance(other, Activity):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self):
        return str(self.to_dict())
