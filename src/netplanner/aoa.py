#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Activity-on-arc network
=======================

Derivation of an activity-on-arc (AOA) view of the precedence graph, used
for network diagrams. Events are nodes, activities are arcs, and zero
duration dummy arcs keep the precedence relations exact.

Construction rules
------------------
1. Every distinct minimal predecessor set gets its own start event;
   activities without predecessors start at the project start event.
2. An activity ends directly at the start event of its successors when it
   belongs to one minimal predecessor set only, or when that set consists of
   this activity alone. Otherwise it ends at an event of its own, which is
   connected to the start events of its successor groups by dummies.
3. Activities without successors end at the project end event.
4. Activities which would share both start and end events are separated:
   the longest one keeps the direct arc, the others end at their own event
   followed by a dummy.

Events are numbered by stage (longest arc count from the start event), so
every arc goes from a lower to a higher event number.
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

import graphviz
import pandas as pd

from .errors import NetworkError
from .floats import EPSILON, tolerance

logger = logging.getLogger(__name__)

#==============================================================================
class Event:
    """
    Event (milestone) of the AOA network.

    Attributes
    ----------
    id : int
        Event number, assigned by stage
    stage : int
        Longest arc count from the project start event
    early, late : float
        Earliest and latest event times
    reserve : float
        Event time reserve
    in_arcs, out_arcs : list
        Arcs entering and leaving the event
    """

    def __init__(self, id, network):
        assert isinstance(id, int)
        assert isinstance(network, AoaNetwork)

        self.id      = id
        self.network = network

        self.in_arcs  = []
        self.out_arcs = []

        # CPM time parameters (calculated later)
        self.early   = 0.0
        self.late    = 0.0
        self.reserve = 0.0
        self.stage   = 0

    @property
    def is_critical(self):
        return 0.0 == self.reserve

    def __repr__(self):
        return str(self.to_dict())

    def to_dict(self):
        return {
            'id'      : self.id,
            'stage'   : self.stage,
            'early'   : self.early,
            'late'    : self.late,
            'reserve' : self.reserve,
            'critical': self.is_critical,
        }

#==============================================================================
class Arc:
    """
    Arc of the AOA network: a real activity or a dummy.

    Attributes
    ----------
    id : int
        Arc number, real activities go first
    activity_id : str or None
        Identifier of the activity, None for dummies
    label : str
        Activity identifier or ``'#<n>'`` for dummies
    src, dst : Event
        Start and end events
    duration, variance : float
        Activity duration and its variance, zero for dummies
    total_float : float
        Arc time reserve computed on the event network
    """

    def __init__(self, id, src, dst, activity_id=None, label='', name='',
                 duration=0.0, variance=0.0):
        assert isinstance(id, int)
        assert isinstance(src, Event)
        assert isinstance(dst, Event)
        assert duration >= 0.0

        self.id          = id
        self.src         = src
        self.dst         = dst
        self.activity_id = activity_id
        self.label       = label
        self.name        = name
        self.duration    = float(duration)
        self.variance    = float(variance)

        self.total_float = 0.0

    @property
    def is_dummy(self):
        return self.activity_id is None

    @property
    def is_critical(self):
        return 0.0 == self.total_float

    def __repr__(self):
        return str(self.to_dict())

    def to_dict(self):
        return {
            'id'         : self.id,
            'activity_id': self.activity_id,
            'label'      : self.label,
            'name'       : self.name,
            'src_id'     : self.src.id,
            'dst_id'     : self.dst.id,
            'duration'   : self.duration,
            'variance'   : self.variance,
            'early_start': self.src.early,
            'late_end'   : self.dst.late,
            'total_float': self.total_float,
            'critical'   : self.is_critical,
            'dummy'      : self.is_dummy,
        }

#==============================================================================
class AoaNetwork:
    """
    Activity-on-arc network, a read only view built by :func:`derive`.

    Attributes
    ----------
    events : list
        :class:`Event` objects ordered by number
    arcs : list
        :class:`Arc` objects, real activities in topological order followed
        by dummies
    """

    def __init__(self, tol):
        self.tol    = tol
        self.events = []
        self.arcs   = []
        self._dummies = 0

    #--------------------------------------------------------------------------
    def _add_event(self):
        e = Event(len(self.events) + 1, self)
        self.events.append(e)
        return e

    def _add_arc(self, src, dst, **kwargs):
        if kwargs.get('activity_id') is None:
            self._dummies += 1
            kwargs['label'] = '#' + str(self._dummies)

        a = Arc(len(self.arcs) + 1, src, dst, **kwargs)
        src.out_arcs.append(a)
        dst.in_arcs.append(a)
        self.arcs.append(a)
        return a

    #--------------------------------------------------------------------------
    def _compute_target(self, target=None):
        """
        Compute event parameters by network traversal.

        Parameters
        ----------
        target : str
            What to compute: 'stage', 'early' or 'late'
        """
        if 'stage' == target:
            fwd      = 'out_arcs'
            rev      = 'in_arcs'
            act_next = 'dst'
            choice   = max
            delta    = lambda a: 1

        elif 'early' == target:
            fwd      = 'out_arcs'
            rev      = 'in_arcs'
            act_next = 'dst'
            choice   = max
            delta    = lambda a: a.duration

        elif 'late' == target:
            fwd      = 'in_arcs'
            rev      = 'out_arcs'
            act_next = 'src'
            choice   = min
            delta    = lambda a: -a.duration

        else:
            raise ValueError("Unknown 'target' value!!!")

        index = {e.id: i for i, e in enumerate(self.events)}

        # Count dependencies for topological sorting
        n_dep = [len(getattr(e, rev)) for e in self.events]

        # Find starting events (no dependencies)
        evt = [i for i, n in enumerate(n_dep) if 0 == n]
        # Check for programming errors
        if 1 != len(evt):
            raise NetworkError("The network must have exactly one starting event!!!")

        # Process events in topological order
        i = 0
        while i < len(evt):
            e = self.events[evt[i]]
            base_val = getattr(e, target)

            for a in getattr(e, fwd):
                new_val  = base_val + delta(a)
                next_evt = getattr(a, act_next)
                next_i   = index[next_evt.id]

                setattr(next_evt, target, choice(getattr(next_evt, target), new_val))

                n_dep[next_i] -= 1
                if 0 >= n_dep[next_i]:
                    evt.append(next_i)
            i += 1

        if len(evt) != len(self.events):
            raise NetworkError("The network has a cycle!!!")

    def _compute_time_params(self):
        for e in self.events:
            e.stage = 0
        self._compute_target('stage')

        # Renumerate events according to the rules of network modeling
        self.events.sort(key=lambda e: e.stage)
        for i, e in enumerate(self.events, 1):
            e.id = i

        for e in self.events:
            e.early = 0.0
        self._compute_target('early')

        # Set late times starting from project completion
        end = self.sink.early
        for e in self.events:
            e.late = end
        self._compute_target('late')

        # Compute reserves
        for e in self.events:
            r = e.late - e.early
            # Check for programming errors
            if r <= -self.tol:
                raise NetworkError("Events can not have negative time reserves!!!")
            # Round off insignificant values
            e.reserve = r if abs(r) >= self.tol else 0.0

        for a in self.arcs:
            r = a.dst.late - a.src.early - a.duration
            # Check for programming errors
            if r <= -self.tol:
                raise NetworkError("Arcs can not have negative time reserves!!!")
            a.total_float = r if abs(r) >= self.tol else 0.0

    #--------------------------------------------------------------------------
    @property
    def source(self):
        """Project start event."""
        return self.events[0]

    @property
    def sink(self):
        """Project end event."""
        return self.events[-1]

    @property
    def dummies(self):
        return [a for a in self.arcs if a.is_dummy]

    def get_arc(self, activity_id):
        """
        Get the arc of an activity.

        Returns
        -------
        Arc or None
            Arc of the activity or None if not found
        """
        for a in self.arcs:
            if a.activity_id == activity_id:
                return a
        return None

    def __repr__(self):
        """String representation of the network."""
        _repr = 'Events:{\n'
        for e in self.events:
            _repr += '        ' + str(e) + '\n'
        _repr += '}\n'

        _repr += 'Arcs:{\n'
        for a in self.arcs:
            _repr += '        ' + str(a) + '\n'
        _repr += '}\n'

        return _repr

    def to_dict(self):
        """
        Convert network to dictionary representation.

        Returns
        -------
        dict
            ``{'events': [...], 'arcs': [...]}``
        """
        return {
            'events': [e.to_dict() for e in self.events],
            'arcs'  : [a.to_dict() for a in self.arcs],
        }

    def to_dataframe(self):
        """
        Convert network to pandas DataFrames.

        Returns
        -------
        tuple
            (arcs_df, events_df)
        """
        d = self.to_dict()
        return pd.DataFrame(d['arcs']), pd.DataFrame(d['events'])

    def viz(self, output_path=None):
        """
        Create Graphviz visualization of the network.

        Parameters
        ----------
        output_path : str, optional
            Path to render a PNG file to. Nothing is rendered when None.

        Returns
        -------
        graphviz.Digraph
            Graphviz object for rendering or saving

        Notes
        -----
        Critical events and arcs are red, dummies are dashed. Event nodes
        show the event number, early and late times and the reserve.
        """
        dot = graphviz.Digraph(node_attr={'shape': 'record', 'style': 'rounded'})
        dot.graph_attr['rankdir'] = 'LR'

        def _cl(critical):
            return '#ff0000' if critical else '#000000'

        # Add events/nodes
        for e in self.events:
            dot.node(str(e.id),
                     '{{%d |{%.1f|%.1f}| %.2f}}' % (e.id, e.early, e.late, e.reserve),
                     color=_cl(e.is_critical))

        # Add activities/edges
        for a in self.arcs:
            lbl = a.label
            if not a.is_dummy:
                lbl += '\n t=' + format(a.duration, '.1f')
            lbl += '\n r=' + format(a.total_float, '.2f')

            dot.edge(str(a.src.id), str(a.dst.id),
                     label=lbl,
                     color=_cl(a.is_critical),
                     style='dashed' if a.is_dummy else 'solid')

        if output_path is not None:
            dot.render(output_path, format='png', cleanup=True)

        return dot

#==============================================================================
def derive(graph, schedule, epsilon=EPSILON):
    """
    Build the activity-on-arc network of a scheduled project.

    Parameters
    ----------
    graph : Graph
        Validated precedence graph
    schedule : Schedule
        Forward/backward pass result, provides durations
    epsilon : float, default=EPSILON
        Relative tolerance for reserve round off

    Returns
    -------
    AoaNetwork
        The network; activity times are not changed, event times and arc
        reserves are computed on the network itself.

    Notes
    -----
    Events are created in topological order of first appearance and then
    renumbered by stage (longest arc count from the start event), keeping
    creation order within a stage. Numbers therefore grow along every arc
    and are the same for the same input.
    """
    order = graph.order
    pos   = graph.position

    net = AoaNetwork(tolerance(schedule.project_duration, epsilon))
    source = net._add_event()

    # Start events: one per distinct minimal predecessor set
    groups   = {}
    start_of = {}
    for a in order:
        key = frozenset(graph.reduced[a])
        if not key:
            start_of[a] = source
            continue
        if key not in groups:
            groups[key] = net._add_event()
        start_of[a] = groups[key]

    succ_groups = {a: [] for a in order}
    for key in groups:
        for p in key:
            succ_groups[p].append(key)

    # End events
    end_of = {}
    ends   = []
    for a in order:
        keys = succ_groups[a]
        own  = frozenset((a,))
        if own in groups:
            end_of[a] = groups[own]
        elif 1 == len(keys):
            end_of[a] = groups[keys[0]]
        elif not keys:
            end_of[a] = None
            ends.append(a)
        else:
            end_of[a] = net._add_event()

    sink = net._add_event() if order else source
    for a in ends:
        end_of[a] = sink

    # Activities with equal start and end events: keep the longest one
    # on the direct arc, move the others to events of their own
    pairs = {}
    for a in order:
        pairs.setdefault((start_of[a].id, end_of[a].id), []).append(a)

    for acts in pairs.values():
        if len(acts) < 2:
            continue
        keep = max(acts, key=lambda a: schedule.duration[pos[a]])
        for a in acts:
            if a != keep:
                end_of[a] = net._add_event()

    # Real activities
    for a in order:
        i = pos[a]
        act = graph.activities[a]
        net._add_arc(start_of[a], end_of[a], activity_id=a, label=a, name=act.name,
                     duration=schedule.duration[i], variance=schedule.variance[i])

    # Dummies to successor group start events
    for key, evt in groups.items():
        for p in sorted(key, key=pos.get):
            if end_of[p] is not evt:
                net._add_arc(end_of[p], evt)

    # Dummies to the project end event
    for a in ends:
        if end_of[a] is not sink:
            net._add_arc(end_of[a], sink)

    net._compute_time_params()

    logger.debug("AOA network: %d events, %d arcs, %d dummies",
                 len(net.events), len(net.arcs), len(net.dummies))

    return net
