#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Precedence graph
================

Validation of activity lists and construction of the activity-on-node
precedence graph used by all the other computations.
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

from .pert import REORDER, check_estimates

logger = logging.getLogger(__name__)

#==============================================================================
def topological_order(ids, predecessors, successors):
    """
    Sort activities in topological order (Kahn's algorithm).

    Parameters
    ----------
    ids : list
        Activity identifiers in input order
    predecessors : dict
        Activity id -> predecessor ids (no duplicates)
    successors : dict
        Activity id -> successor ids

    Returns
    -------
    tuple
        (order, rest) where ``order`` holds the sorted identifiers and
        ``rest`` the identifiers which could not be sorted (they lie on
        or behind a cycle).

    Notes
    -----
    The queue is seeded with the activities without predecessors in input
    order and successors are released in the order they are listed, so the
    result is deterministic.
    """
    n_dep = {i: len(predecessors[i]) for i in ids}

    order = [i for i in ids if 0 == n_dep[i]]

    k = 0
    while k < len(order):
        for s in successors[order[k]]:
            n_dep[s] -= 1
            if 0 == n_dep[s]:
                order.append(s)
        k += 1

    rest = [i for i in ids if n_dep[i] > 0]
    return order, rest

#==============================================================================
def _find_cycles(rest, predecessors):
    """
    Extract cycles from the activities left unsorted by Kahn's algorithm.

    Each unsorted activity has at least one unsorted predecessor, so walking
    back along unsorted predecessors always ends on a cycle.
    """
    pending = set(rest)
    covered = set()
    cycles  = []

    for start in rest:
        if start in covered:
            continue

        path = []
        seen = {}
        cur  = start
        while cur not in seen and cur not in covered:
            seen[cur] = len(path)
            path.append(cur)
            cur = next(p for p in predecessors[cur] if p in pending)

        covered.update(path)
        if cur in seen:
            # Walk went against precedence direction
            cycle = path[seen[cur]:][::-1]
            first = min(range(len(cycle)), key=lambda i: rest.index(cycle[i]))
            cycles.append(cycle[first:] + cycle[:first])

    return cycles

#==============================================================================
class Graph:
    """
    Activity-on-node precedence graph.

    Parameters
    ----------
    activities : dict
        Activity id -> Activity, in input order
    predecessors : dict
        Activity id -> tuple of predecessor ids
    successors : dict
        Activity id -> list of successor ids
    order : list
        Topological order of activity ids

    Attributes
    ----------
    ids : list
        Activity identifiers in input order
    order : list
        Activity identifiers in topological order
    position : dict
        Activity id -> index in :attr:`order`
    dep_map : numpy.ndarray
        Full (transitive) dependency map, ``dep_map[i, j]`` is True when
        activity ``order[j]`` must be finished before ``order[i]`` starts
    reduced : dict
        Activity id -> predecessors which are not implied by other
        predecessors (transitive reduction)
    """

    def __init__(self, activities, predecessors, successors, order):
        assert len(order) == len(activities)

        self.activities   = activities
        self.ids          = list(activities.keys())
        self.predecessors = predecessors
        self.successors   = successors
        self.order        = list(order)
        self.position     = {a: i for i, a in enumerate(self.order)}

        # Construct full dependency map
        n = len(self.order)
        self.dep_map = np.zeros((n, n), dtype=bool)
        for i, a in enumerate(self.order):
            for p in predecessors[a]:
                j = self.position[p]
                self.dep_map[i, j] = True
                self.dep_map[i] |= self.dep_map[j]

        # Compute minimal dependency lists
        self.reduced = {}
        for a in self.order:
            self.reduced[a] = tuple(p for p, via in self._links(a) if via is None)

    def _links(self, a):
        """Yield (predecessor, via) pairs, ``via`` is None for essential links."""
        preds = self.predecessors[a]
        for p in preds:
            j = self.position[p]
            via = None
            for q in preds:
                if q != p and self.dep_map[self.position[q], j]:
                    via = q
                    break
            yield p, via

    def redundant_links(self):
        """
        Find precedence links implied by other links.

        Returns
        -------
        list
            (predecessor, activity, via) tuples in topological order
        """
        ret = []
        for a in self.order:
            for p, via in self._links(a):
                if via is not None:
                    ret.append((p, a, via))
        return ret

    def depends_on(self, a, b):
        """True when activity ``a`` (transitively) depends on activity ``b``."""
        return bool(self.dep_map[self.position[a], self.position[b]])

    @property
    def starts(self):
        """Activities without predecessors, in topological order."""
        return [a for a in self.order if not self.predecessors[a]]

    @property
    def ends(self):
        """Activities without successors, in topological order."""
        return [a for a in self.order if not self.successors[a]]

    def __len__(self):
        return len(self.order)

    def __contains__(self, act_id):
        return act_id in self.activities

    def __repr__(self):
        return 'Graph(' + str({a: list(self.predecessors[a]) for a in self.order}) + ')'

#==============================================================================
def build(activities, policy=REORDER):
    """
    Validate activities and build the precedence graph.

    Parameters
    ----------
    activities : list
        Activity objects, they are not modified
    policy : str, default='reorder'
        Estimate check policy, see :func:`netplanner.pert.check_estimates`

    Returns
    -------
    tuple
        (graph, errors, warnings). ``graph`` is None when ``errors`` is not
        empty. All problems are collected, not only the first one.

    Notes
    -----
    Errors: duplicate identifiers, unknown predecessors, self references,
    cycles, and estimate problems under the ``'reject'`` policy.

    Warnings: empty activity set, repeated predecessors, redundant
    (transitively implied) links, and estimates fixed under the
    ``'reorder'`` policy.
    """
    errors   = []
    warnings = []

    if not activities:
        warnings.append("No activities to schedule")

    acts = {}
    for act in activities:
        if act.id in acts:
            errors.append(f"Duplicate activity id '{act.id}'")
            continue

        act, w, e = check_estimates(act, policy)
        warnings += w
        errors   += e
        acts[act.id] = act

    predecessors = {}
    successors   = {a: [] for a in acts}
    for a, act in acts.items():
        preds = []
        for p in act.predecessors:
            if p == a:
                errors.append(f"Activity '{a}' lists itself as a predecessor")
            elif p not in acts:
                errors.append(f"Activity '{a}' has unknown predecessor '{p}'")
            elif p in preds:
                warnings.append(f"Activity '{a}' lists predecessor '{p}' more than once")
            else:
                preds.append(p)
                successors[p].append(a)
        predecessors[a] = tuple(preds)

    order, rest = topological_order(list(acts.keys()), predecessors, successors)
    if rest:
        for cycle in _find_cycles(rest, predecessors):
            errors.append("Cycle detected: " + ' -> '.join(cycle + cycle[:1]))

    if errors:
        logger.debug("Graph validation failed with %d errors", len(errors))
        return None, errors, warnings

    graph = Graph(acts, predecessors, successors, order)

    for p, a, via in graph.redundant_links():
        warnings.append(f"Precedence '{p}' -> '{a}' is redundant, it is implied through '{via}'")

    logger.debug("Built graph of %d activities, %d starts, %d ends",
                 len(graph), len(graph.starts), len(graph.ends))

    return graph, errors, warnings
