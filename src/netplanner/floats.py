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
import numpy as np

from .errors import NetworkError

# Relative tolerance for time comparisons
EPSILON = 1e-9

#==============================================================================
def tolerance(scale, epsilon=EPSILON):
    """
    Absolute tolerance for time comparisons.

    Parameters
    ----------
    scale : float
        Typical time value, normally the project duration
    epsilon : float, default=EPSILON
        Relative tolerance

    Returns
    -------
    float
        ``epsilon * max(1, |scale|)``
    """
    return epsilon * max(1.0, abs(scale))

#==============================================================================
def close(x, y, tol):
    return abs(x - y) < tol

#==============================================================================
def annotate(es, ef, ls, lf, successor_es=(), tol=None):
    """
    Compute time reserves of one activity.

    Parameters
    ----------
    es, ef, ls, lf : float
        Earliest start/finish and latest start/finish of the activity
    successor_es : iterable of float
        Earliest starts of the activity successors
    tol : float, optional
        Absolute tolerance, defaults to :func:`tolerance` of ``lf``

    Returns
    -------
    tuple
        (total_float, free_float, is_critical). Reserves smaller than the
        tolerance are rounded off to zero.
    """
    if tol is None:
        tol = tolerance(lf)

    total = ls - es

    successor_es = list(successor_es)
    if successor_es:
        free = min(successor_es) - ef
    else:
        free = total

    is_critical = abs(total) < tol

    # Round off insignificant values
    total = 0.0 if is_critical else float(total)
    free  = 0.0 if abs(free) < tol else float(free)

    return total, free, is_critical

#==============================================================================
def analyze(graph, schedule, epsilon=EPSILON):
    """
    Compute time reserves of all activities.

    Parameters
    ----------
    graph : Graph
        Precedence graph
    schedule : Schedule
        Forward/backward pass result for the graph
    epsilon : float, default=EPSILON
        Relative tolerance

    Returns
    -------
    tuple
        (total_float, free_float, critical) numpy arrays indexed by
        topological position

    Raises
    ------
    NetworkError
        If a negative time reserve appears, which means the passes were
        computed wrong.
    """
    n = len(graph.order)
    tol = tolerance(schedule.project_duration, epsilon)

    total_float = np.zeros(n, dtype=float)
    free_float  = np.zeros(n, dtype=float)
    critical    = np.zeros(n, dtype=bool)

    for i, a in enumerate(graph.order):
        succ_es = [schedule.es[graph.position[s]] for s in graph.successors[a]]

        t, f, c = annotate(schedule.es[i], schedule.ef[i],
                           schedule.ls[i], schedule.lf[i], succ_es, tol)

        # Check for programming errors
        if t < 0.0 or f < 0.0:
            raise NetworkError(f"Activity '{a}' can not have negative time reserve!!!")

        total_float[i] = t
        free_float[i]  = f
        critical[i]    = c

    return total_float, free_float, critical
