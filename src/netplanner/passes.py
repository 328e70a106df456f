#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Forward and backward passes
===========================

Earliest and latest times of activities on the precedence graph.

Forward pass (topological order)::

    ES = max(EF of predecessors) or 0
    EF = ES + duration

Backward pass (reverse topological order)::

    LF = min(LS of successors) or project duration
    LS = LF - duration

For PERT models the variance of earliest times is propagated along the
driving predecessors: ``var(EF) = var(ES) + var(duration)``. Where several
predecessors finish at the same time the largest variance is kept.
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
import logging

import numpy as np

from .errors import NetworkError
from .floats import EPSILON, close, tolerance

logger = logging.getLogger(__name__)

#==============================================================================
class Schedule:
    """
    Activity times computed by :func:`run`.

    All arrays are indexed by topological position (``graph.position``).

    Attributes
    ----------
    order : list
        Activity identifiers in topological order
    duration, variance : numpy.ndarray
        Activity durations and their variances
    es, ef, ls, lf : numpy.ndarray
        Earliest start/finish, latest start/finish
    es_var, ef_var : numpy.ndarray
        Variances of earliest start/finish
    project_duration : float
        Maximum earliest finish over activities without successors
    project_variance : float
        Largest earliest finish variance over the activities finishing the
        project
    """

    def __init__(self, order, duration, variance):
        n = len(order)

        self.order    = order
        self.index    = {a: i for i, a in enumerate(order)}
        self.duration = duration
        self.variance = variance

        self.es = np.zeros(n, dtype=float)
        self.ef = np.zeros(n, dtype=float)
        self.ls = np.zeros(n, dtype=float)
        self.lf = np.zeros(n, dtype=float)

        self.es_var = np.zeros(n, dtype=float)
        self.ef_var = np.zeros(n, dtype=float)

        self.project_duration = 0.0
        self.project_variance = 0.0

    def times(self, act_id):
        """Get activity times as a dictionary."""
        i = self.index[act_id]
        return {
            'es': float(self.es[i]),
            'ef': float(self.ef[i]),
            'ls': float(self.ls[i]),
            'lf': float(self.lf[i]),
        }

    def __len__(self):
        return len(self.order)

    def __repr__(self):
        return str({a: self.times(a) for a in self.order})

#==============================================================================
def _vector(values, order, name):
    if values is None:
        return np.zeros(len(order), dtype=float)

    if isinstance(values, dict):
        values = [values[a] for a in order]

    ret = np.asarray(values, dtype=float)
    assert ret.shape == (len(order),), f"Wrong {name} vector shape"
    return ret

#==============================================================================
def run(graph, durations, variances=None, epsilon=EPSILON):
    """
    Compute earliest and latest activity times.

    Parameters
    ----------
    graph : Graph
        Validated precedence graph
    durations : dict or array-like
        Activity id -> duration, or durations in topological order
    variances : dict or array-like, optional
        Duration variances (PERT), zero by default
    epsilon : float, default=EPSILON
        Relative tolerance used to detect equal finish times

    Returns
    -------
    Schedule
        Computed times

    Raises
    ------
    NetworkError
        If the graph order is not topological, e.g. the graph has a cycle.
        This is a programming error: the graph builder rejects cycles.
    """
    order = graph.order
    pos   = graph.position

    # Check for programming errors
    if len(order) != len(graph.activities):
        raise NetworkError("Topological order does not cover all activities, the graph is not a DAG!!!")

    sch = Schedule(order, _vector(durations, order, 'durations'),
                   _vector(variances, order, 'variances'))

    n = len(order)
    if 0 == n:
        return sch

    # Forward pass
    for i, a in enumerate(order):
        first = True
        for p in graph.predecessors[a]:
            j = pos[p]
            if j >= i:
                raise NetworkError(f"Activity '{p}' is not scheduled before '{a}', the graph is not a DAG!!!")

            new = sch.ef[j]
            tol = tolerance(new, epsilon)
            if first or new > sch.es[i] + tol:
                # Certain result
                sch.es[i]     = new
                sch.es_var[i] = sch.ef_var[j]
            elif close(new, sch.es[i], tol):
                # Equal finish times, keep the larger variance
                sch.es[i]     = max(sch.es[i], new)
                sch.es_var[i] = max(sch.es_var[i], sch.ef_var[j])
            first = False

        sch.ef[i]     = sch.es[i] + sch.duration[i]
        sch.ef_var[i] = sch.es_var[i] + sch.variance[i]

    ends = [pos[a] for a in order if not graph.successors[a]]
    sch.project_duration = float(max(sch.ef[i] for i in ends))

    tol = tolerance(sch.project_duration, epsilon)
    sch.project_variance = float(max(sch.ef_var[i] for i in ends
                                     if close(sch.ef[i], sch.project_duration, tol)))

    # Backward pass
    for i in range(n - 1, -1, -1):
        a = order[i]
        succ = graph.successors[a]
        if succ:
            lf = None
            for s in succ:
                j = pos[s]
                if j <= i:
                    raise NetworkError(f"Activity '{s}' is not scheduled after '{a}', the graph is not a DAG!!!")
                lf = sch.ls[j] if lf is None else min(lf, sch.ls[j])
            sch.lf[i] = lf
        else:
            sch.lf[i] = sch.project_duration

        sch.ls[i] = sch.lf[i] - sch.duration[i]

    logger.debug("Passes done: %d activities, project duration %g", n, sch.project_duration)

    return sch
