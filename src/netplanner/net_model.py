#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
NetPlanner - CPM and PERT scheduling
====================================

This module ties the scheduling stages together:

    activities -> graph -> PERT estimates -> passes -> floats
               -> critical paths -> AOA network -> result

Features:
    - CPM (single duration) and PERT (three-point estimate) activities,
      mixed freely in one project
    - All validation problems collected as error and warning strings
    - Project duration distribution for PERT models
    - Activity-on-arc network with Graphviz visualization
    - Export to dictionaries and pandas DataFrames

Classes:
    - ScheduleResult: result of :func:`compute`
    - ComputedActivity: activity with its computed time parameters

Usage Example:
    >>> result = compute([
    ...     {'id': 'A', 'duration': 2},
    ...     {'id': 'B', 'optimistic': 1, 'most_likely': 2, 'pessimistic': 9, 'predecessors': 'A'},
    ... ])
    >>> result.project_duration
    5.0
    >>> activities_df, events_df = result.to_dataframe()
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
import pandas as pd

from .activity import Activity
from .aoa import derive
from .floats import EPSILON, analyze, tolerance
from .graph import build
from .passes import run
from .paths import find_critical_paths
from .pert import POLICIES, REORDER, ProjectDistribution, activity_quantile, estimate

logger = logging.getLogger(__name__)

#==============================================================================
class ComputedActivity:
    """
    Activity with computed time parameters.

    Attributes
    ----------
    activity : Activity
        Input record the times were computed for (after estimate fixes)
    duration : float
        Duration used by the passes, the expected duration for PERT
    variance : float
        Duration variance, zero for CPM activities
    es, ef, ls, lf : float
        Earliest start/finish, latest start/finish
    total_float, free_float : float
        Time reserves
    is_critical : bool
        True when the total float is zero within tolerance
    es_var, ef_var : float
        Variances of the earliest start and finish (PERT)
    duration_pqe : float
        Duration quantile for the result probability level
    """

    def __init__(self, activity, result, i, schedule, total_float, free_float, critical):
        self.activity = activity
        self.result   = result

        self.duration = float(schedule.duration[i])
        self.variance = float(schedule.variance[i])

        self.es = float(schedule.es[i])
        self.ef = float(schedule.ef[i])
        self.ls = float(schedule.ls[i])
        self.lf = float(schedule.lf[i])

        self.es_var = float(schedule.es_var[i])
        self.ef_var = float(schedule.ef_var[i])

        self.total_float = float(total_float[i])
        self.free_float  = float(free_float[i])
        self.is_critical = bool(critical[i])

        # Unrounded reserve for debug output
        self._raw_float = float(schedule.ls[i] - schedule.es[i])

        if activity.is_pert:
            self.duration_pqe = activity_quantile(result.p, activity.optimistic,
                                                  activity.most_likely,
                                                  activity.pessimistic)
        else:
            self.duration_pqe = self.duration

    @property
    def id(self):
        return self.activity.id

    @property
    def name(self):
        return self.activity.name

    @property
    def predecessors(self):
        return self.activity.predecessors

    @property
    def expected_duration(self):
        return self.duration

    @property
    def data(self):
        return self.activity.data

    def __repr__(self):
        """String representation of the activity."""
        return str(self.to_dict())

    def to_dict(self):
        """
        Convert activity to dictionary representation.

        Returns
        -------
        dict
            Dictionary containing all activity data:

            - ``id``, ``name``, ``predecessors``: input fields
            - ``duration``: duration used for scheduling
            - ``es``, ``ef``, ``ls``, ``lf``: timing parameters
            - ``total_float``, ``free_float``, ``critical``: reserves
            - ``data``: additional activity data
            - Additional PERT fields if applicable

        Notes
        -----
        PERT fields (``optimistic``, ``most_likely``, ``pessimistic``,
        ``variance``, ``es_var``, ``ef_var``, ``duration_pqe``) are only
        included when the result is a PERT model.
        """
        act = self.activity
        ret = {
            'id'          : act.id,
            'name'        : act.name,
            'predecessors': list(act.predecessors),
            'duration'    : self.duration,

            # CPM timing parameters
            'es'          : self.es,
            'ef'          : self.ef,
            'ls'          : self.ls,
            'lf'          : self.lf,
            'total_float' : self.total_float,
            'free_float'  : self.free_float,
            'critical'    : self.is_critical,

            # Additional data copy
            'data'        : act.data.copy(),
        }

        if self.result.is_pert:
            ret['optimistic']   = act.optimistic
            ret['most_likely']  = act.most_likely
            ret['pessimistic']  = act.pessimistic
            ret['variance']     = self.variance
            ret['es_var']       = self.es_var
            ret['ef_var']       = self.ef_var
            ret['duration_pqe'] = self.duration_pqe

        if self.result.debug:
            ret['total_float_raw'] = self._raw_float
            ret['tolerance']       = self.result.tol

        return ret

#==============================================================================
class ScheduleResult:
    """
    Result of a schedule computation.

    A result with a non-empty :attr:`errors` list carries no numeric data:
    :attr:`project_duration` is None, there are no activities, critical
    paths or network.

    Attributes
    ----------
    activities : list
        :class:`ComputedActivity` objects in input order
    project_duration : float or None
        Maximum earliest finish over the project end activities
    critical_paths : list
        :class:`netplanner.paths.CriticalPath` objects
    network : AoaNetwork or None
        Activity-on-arc network
    distribution : ProjectDistribution or None
        Project duration distribution, PERT models only
    errors, warnings : list
        Validation messages
    """

    def __init__(self, p=0.95, epsilon=EPSILON, debug=False):
        self.p       = p
        self.epsilon = epsilon
        self.debug   = debug
        self.tol     = tolerance(0.0, epsilon)

        self.activities       = []
        self.project_duration = None
        self.critical_paths   = []
        self.network          = None
        self.distribution     = None
        self.is_pert          = False

        self.errors   = []
        self.warnings = []

        self._index = {}

    @property
    def ok(self):
        return not self.errors

    @property
    def critical_activities(self):
        """Identifiers of critical activities in input order."""
        return [a.id for a in self.activities if a.is_critical]

    def get(self, act_id):
        """
        Get computed activity by identifier.

        Returns
        -------
        ComputedActivity or None
            Activity object or None if not found
        """
        return self._index.get(act_id)

    def __getitem__(self, act_id):
        return self._index[act_id]

    def __contains__(self, act_id):
        return act_id in self._index

    def __len__(self):
        return len(self.activities)

    def __repr__(self):
        """String representation of the result."""
        _repr = 'Activities:{\n'
        for a in self.activities:
            _repr += '        ' + str(a) + '\n'
        _repr += '}\n'

        _repr += 'Critical paths:{\n'
        for cp in self.critical_paths:
            _repr += '        ' + str(cp) + '\n'
        _repr += '}\n'

        if self.errors:
            _repr += 'Errors: ' + str(self.errors) + '\n'
        if self.warnings:
            _repr += 'Warnings: ' + str(self.warnings) + '\n'

        return _repr

    def to_dict(self):
        """
        Convert result to dictionary representation.

        Returns
        -------
        dict
            Plain data with ``ok``, ``project_duration``, ``activities``,
            ``critical_paths`` (lists of identifiers), ``network``,
            ``distribution``, ``errors`` and ``warnings``
        """
        return {
            'ok'              : self.ok,
            'project_duration': self.project_duration,
            'activities'      : [a.to_dict() for a in self.activities],
            'critical_paths'  : [cp.to_list() for cp in self.critical_paths],
            'network'         : None if self.network is None else self.network.to_dict(),
            'distribution'    : None if self.distribution is None else self.distribution.to_dict(),
            'errors'          : list(self.errors),
            'warnings'        : list(self.warnings),
        }

    def to_dataframe(self):
        """
        Convert result to pandas DataFrames.

        Returns
        -------
        tuple
            (activities_df, events_df) - pandas DataFrames for activities
            and AOA network events

        Notes
        -----
        The activities DataFrame expands all custom data fields from the
        'data' attribute into separate columns, predecessors are joined
        with ``;``.
        """
        expanded_activities = []
        for a in self.activities:
            activity = a.to_dict()
            activity_data = {k: v for k, v in activity.items() if k != 'data'}
            activity_data['predecessors'] = ';'.join(activity['predecessors'])

            # Add data fields as separate columns
            if activity['data']:
                activity_data.update(activity['data'])

            expanded_activities.append(activity_data)

        activities_df = pd.DataFrame(expanded_activities).fillna(value='')

        if self.network is None:
            events_df = pd.DataFrame()
        else:
            events_df = pd.DataFrame([e.to_dict() for e in self.network.events])

        return activities_df, events_df

    def viz(self, output_path=None):
        """
        Create Graphviz visualization of the AOA network.

        See :meth:`netplanner.aoa.AoaNetwork.viz`.
        """
        if self.network is None:
            raise ValueError("The result has errors, there is no network to draw")
        return self.network.viz(output_path)

#==============================================================================
def _normalize(activities):
    """
    Convert mixed input records to Activity objects.

    Returns
    -------
    tuple
        (activities, errors)
    """
    if isinstance(activities, dict):
        records = []
        for k, v in activities.items():
            if isinstance(v, dict):
                v = dict(v)
                v.setdefault('id', k)
            records.append(v)
    else:
        records = list(activities)

    ret    = []
    errors = []
    for i, r in enumerate(records):
        if isinstance(r, Activity):
            ret.append(r)
        elif isinstance(r, dict):
            try:
                ret.append(Activity.from_dict(r))
            except (TypeError, ValueError) as e:
                errors.append(f"Record {i + 1}: {e}")
        else:
            errors.append(f"Record {i + 1}: unsupported activity record type {type(r).__name__}")

    return ret, errors

#==============================================================================
def compute(activities, p=0.95, epsilon=EPSILON, estimate_policy=REORDER, debug=False):
    """
    Compute CPM/PERT schedule of a project.

    Parameters
    ----------
    activities : list or dict
        :class:`Activity` objects, plain dicts, or a mapping
        ``{id: record}``. Input objects are never modified.
    p : float, default=0.95
        Probability level for quantile estimates (``pqe`` fields)
    epsilon : float, default=EPSILON
        Relative tolerance for criticality and path membership
    estimate_policy : str, default='reorder'
        ``'reorder'`` fixes bad estimates with a warning, ``'reject'``
        reports them as errors
    debug : bool, default=False
        Add raw reserves and tolerance to ``to_dict()`` output

    Returns
    -------
    ScheduleResult
        Computation result. Problems with the input data are reported in
        ``errors`` and ``warnings``, they never raise.

    Raises
    ------
    ValueError
        If ``p``, ``epsilon`` or ``estimate_policy`` are invalid.
    """
    if not 0.0 < p < 1.0:
        raise ValueError(f"Probability level must be in (0, 1), got {p}")
    if not epsilon > 0.0:
        raise ValueError(f"Tolerance must be positive, got {epsilon}")
    if estimate_policy not in POLICIES:
        raise ValueError(f"Unknown estimate policy {estimate_policy!r}, use one of {POLICIES}")

    result = ScheduleResult(p=p, epsilon=epsilon, debug=debug)

    acts, errors = _normalize(activities)

    graph, e, w = build(acts, estimate_policy)
    result.errors   = errors + e
    result.warnings = w

    if result.errors:
        logger.debug("Schedule computation aborted with %d errors", len(result.errors))
        return result

    order = graph.order
    pos   = graph.position

    # PERT estimates
    durations = np.zeros(len(order), dtype=float)
    variances = np.zeros(len(order), dtype=float)
    for a in order:
        durations[pos[a]], variances[pos[a]] = estimate(graph.activities[a])

    schedule = run(graph, durations, variances, epsilon)
    total_float, free_float, critical = analyze(graph, schedule, epsilon)

    result.project_duration = schedule.project_duration
    result.tol = tolerance(schedule.project_duration, epsilon)
    result.is_pert = any(graph.activities[a].is_pert for a in order)

    result.critical_paths = find_critical_paths(graph, schedule, critical, epsilon)
    result.network = derive(graph, schedule, epsilon)

    if result.is_pert:
        def _bound(field):
            vec = [getattr(act, field) if act.is_pert else act.duration
                   for act in (graph.activities[a] for a in order)]
            return run(graph, vec, None, epsilon).project_duration

        result.distribution = ProjectDistribution(schedule.project_duration,
                                                  schedule.project_variance,
                                                  _bound('optimistic'),
                                                  _bound('pessimistic'), p)

    for a in graph.ids:
        ca = ComputedActivity(graph.activities[a], result, pos[a], schedule,
                              total_float, free_float, critical)
        result.activities.append(ca)
        result._index[a] = ca

    logger.debug("Computed schedule: %d activities, duration %g, %d critical paths",
                 len(order), result.project_duration, len(result.critical_paths))

    return result
