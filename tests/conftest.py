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
import os
import sys

import networkx as nx
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src'))

from netplanner import Activity

#==============================================================================
def random_project(n, p, seed, fractional=False):
    """
    Random project on a random DAG.

    Returns
    -------
    tuple
        (dag, activities), ``dag`` nodes are integers, activity ids are
        ``'T<node>'``
    """
    g = nx.gnp_random_graph(n, p, seed=seed, directed=True)
    dag = nx.DiGraph([(u, v) for (u, v) in g.edges() if u < v])
    dag.add_nodes_from(range(n))

    rng = np.random.default_rng(seed)
    acts = []
    for v in range(n):
        if fractional:
            d = float(rng.integers(1, 100)) / 10
        else:
            d = int(rng.integers(1, 10))
        acts.append(Activity(f'T{v}', duration=d,
                             predecessors=[f'T{u}' for u in sorted(dag.predecessors(v))]))
    return dag, acts

def longest_path(dag, acts):
    """Project duration computed with networkx."""
    d = {int(a.id[1:]): a.duration for a in acts}
    g = nx.DiGraph()
    for v in dag.nodes():
        g.add_edge(v, 'end', weight=d[v])
    for u, v in dag.edges():
        g.add_edge(u, v, weight=d[u])
    return nx.dag_longest_path_length(g, weight='weight')

#==============================================================================
@pytest.fixture
def scenario():
    """Five activity project with project duration 10 along B -> D -> E."""
    return [
        Activity('A', duration=2),
        Activity('B', duration=3),
        Activity('C', duration=3, predecessors=['A']),
        Activity('D', duration=4, predecessors=['A', 'B']),
        Activity('E', duration=3, predecessors=['C', 'D']),
    ]

@pytest.fixture
def pert_chain():
    return [
        Activity('A', optimistic=1, most_likely=2, pessimistic=3),
        Activity('B', optimistic=2, most_likely=4, pessimistic=6, predecessors='A'),
    ]
