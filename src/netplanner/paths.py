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
import logging

from .floats import EPSILON, close, tolerance

logger = logging.getLogger(__name__)

#==============================================================================
class CriticalPath:
    """
    Sequence of critical activities from a project start to a project end.

    Parameters
    ----------
    activities : iterable
        Activity identifiers in precedence order
    duration : float
        Sum of activity durations along the path
    variance : float
        Sum of activity duration variances along the path (PERT)
    """

    def __init__(self, activities, duration=0.0, variance=0.0):
        self.activities = tuple(activities)
        self.duration   = float(duration)
        self.variance   = float(variance)

    def to_list(self):
        return list(self.activities)

    def to_dict(self):
        return {
            'activities': self.to_list(),
            'duration'  : self.duration,
            'variance'  : self.variance,
        }

    def __iter__(self):
        return iter(self.activities)

    def __len__(self):
        return len(self.activities)

    def __getitem__(self, i):
        return self.activities[i]

    def __eq__(self, other):
        if isinstance(other, CriticalPath):
            return self.activities == other.activities
        if isinstance(other, (list, tuple)):
            return self.activities == tuple(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return ' -> '.join(self.activities)

#==============================================================================
def find_critical_paths(graph, schedule, critical, epsilon=EPSILON):
    """
    Enumerate all critical paths.

    Parameters
    ----------
    graph : Graph
        Precedence graph
    schedule : Schedule
        Forward/backward pass result
    critical : array-like of bool
        Critical flags indexed by topological position
    epsilon : float, default=EPSILON
        Relative tolerance

    Returns
    -------
    list
        :class:`CriticalPath` objects

    Notes
    -----
    The graph is restricted to critical activities and the driving links
    between them (predecessor finish equals successor start). Paths are
    traced depth first from every critical activity without a critical
    driving predecessor, in topological order, following successors in the
    order they were listed. A critical activity which has neither critical
    predecessors nor critical successors forms a path of its own.
    """
    pos = graph.position
    tol = tolerance(schedule.project_duration, epsilon)

    def _next(a):
        i = pos[a]
        return [s for s in graph.successors[a]
                if critical[pos[s]] and close(schedule.es[pos[s]], schedule.ef[i], tol)]

    has_prev = set()
    for a in graph.order:
        if critical[pos[a]]:
            has_prev.update(_next(a))

    paths = []
    for start in graph.order:
        if not critical[pos[start]] or start in has_prev:
            continue

        stack = [(start,)]
        while stack:
            path = stack.pop()
            nxt = _next(path[-1])
            if not nxt:
                idx = [pos[a] for a in path]
                paths.append(CriticalPath(path,
                                          sum(schedule.duration[i] for i in idx),
                                          sum(schedule.variance[i] for i in idx)))
                continue
            # First listed successor must be popped first
            for s in reversed(nxt):
                stack.append(path + (s,))

    logger.debug("Found %d critical paths", len(paths))

    return paths
