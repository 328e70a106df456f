#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PERT estimates
==============

Three-point estimate handling and the project duration distribution.

- :func:`estimate` converts an activity estimate into expected duration and
  variance, ``mean = (a + 4*m + b)/6``, ``variance = ((b - a)/6)**2``;
- :func:`check_estimates` validates estimate ranges and applies the chosen
  policy (reorder/clamp with a warning or reject with an error);
- :func:`activity_quantile` gives quantiles of the PERT-Beta distribution of
  an activity duration;
- :class:`ProjectDistribution` gives a normal approximation of the project
  duration built from the summed variance of the critical path.
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
import scipy.stats as st

EPS = np.finfo(float).eps

REORDER = 'reorder' # Fix estimates and warn
REJECT  = 'reject'  # Report estimate problems as errors
POLICIES = (REORDER, REJECT)

#==============================================================================
def estimate(activity):
    """
    Compute expected duration and variance of an activity.

    Parameters
    ----------
    activity : Activity
        Activity with either a three-point estimate or a single duration

    Returns
    -------
    tuple
        (expected_duration, variance). CPM activities have zero variance.

    Examples
    --------
    >>> estimate(Activity('A', optimistic=1, most_likely=2, pessimistic=3))
    (2.0, 0.1111111111111111)
    """
    if not activity.is_pert:
        return activity.duration, 0.0

    a = activity.optimistic
    m = activity.most_likely
    b = activity.pessimistic

    return (a + 4 * m + b) / 6, ((b - a) / 6) ** 2

#==============================================================================
def check_estimates(activity, policy=REORDER):
    """
    Validate duration data of an activity.

    Parameters
    ----------
    activity : Activity
        Activity to check, it is never modified
    policy : str, default='reorder'
        - ``'reorder'``: negative values are clamped to zero and a misordered
          three-point estimate is sorted, each fix produces a warning;
        - ``'reject'``: each problem produces an error.

    Returns
    -------
    tuple
        (activity, warnings, errors) where ``activity`` is either the
        original object or a corrected copy.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown estimate policy {policy!r}, use one of {POLICIES}")

    warnings = []
    errors   = []
    fixes    = {}

    if activity.is_pert:
        fields = ('optimistic', 'most_likely', 'pessimistic')
    else:
        fields = ('duration',)

    for f in fields:
        v = getattr(activity, f)
        if v >= 0.0:
            continue
        if REJECT == policy:
            errors.append(f"Activity '{activity.id}' has negative {f} {v:g}")
        else:
            warnings.append(f"Activity '{activity.id}' has negative {f} {v:g}, clamped to 0")
            fixes[f] = 0.0

    if activity.is_pert:
        a = fixes.get('optimistic',  activity.optimistic)
        m = fixes.get('most_likely', activity.most_likely)
        b = fixes.get('pessimistic', activity.pessimistic)

        if not (a <= m <= b):
            msg = (f"Activity '{activity.id}' estimates must satisfy optimistic <= most_likely"
                   f" <= pessimistic, got {a:g}, {m:g}, {b:g}")
            if REJECT == policy:
                errors.append(msg)
            else:
                a, m, b = sorted((a, m, b))
                warnings.append(msg + ', reordered')
                fixes.update(optimistic=a, most_likely=m, pessimistic=b)

    if fixes and not errors:
        activity = activity.replace(**fixes)

    return activity, warnings, errors

#==============================================================================
def activity_quantile(p, optimistic, most_likely, pessimistic):
    """
    Quantile of the PERT-Beta distribution of an activity duration.

    Parameters
    ----------
    p : float
        Probability level (0 < p < 1)
    optimistic, most_likely, pessimistic : float
        Ordered three-point estimate

    Returns
    -------
    float
        Duration which is not exceeded with probability ``p``

    Notes
    -----
    The PERT-Beta distribution on ``[a, b]`` has shape parameters
    ``alpha = 1 + 4*(m - a)/(b - a)`` and ``beta = 1 + 4*(b - m)/(b - a)``,
    its mean is ``(a + 4*m + b)/6``. A degenerate estimate (``a == b``)
    is deterministic.
    """
    a, m, b = optimistic, most_likely, pessimistic
    width = b - a

    if width <= EPS * max(abs(a), abs(b), 1.0):
        # Deterministic activity
        return (a + 4 * m + b) / 6

    alpha = 1 + 4 * (m - a) / width
    beta  = 1 + 4 * (b - m) / width

    return float(st.beta.ppf(p, alpha, beta, loc=a, scale=width))

#==============================================================================
class ProjectDistribution:
    """
    Project duration distribution (PERT).

    The project duration is approximated by a normal distribution with the
    expected project duration as the mean and the critical path variance.

    Parameters
    ----------
    mean : float
        Expected project duration
    variance : float
        Project duration variance
    optimistic : float, optional
        Project duration with all activities at their optimistic estimates
    pessimistic : float, optional
        Project duration with all activities at their pessimistic estimates
    p : float, default=0.95
        Probability level for :attr:`pqe`
    """

    def __init__(self, mean, variance, optimistic=None, pessimistic=None, p=0.95):
        assert variance >= 0.0
        assert 0.0 < p < 1.0

        self.mean        = float(mean)
        self.variance    = float(variance)
        self.optimistic  = optimistic
        self.pessimistic = pessimistic
        self.p           = p

    @property
    def std(self):
        """Standard deviation of the project duration."""
        return float(np.sqrt(self.variance))

    @property
    def is_deterministic(self):
        return self.std <= EPS * max(abs(self.mean), 1.0)

    def probability(self, deadline):
        """
        Get probability that the project completes by ``deadline``.

        Parameters
        ----------
        deadline : float
            Time to compare against

        Returns
        -------
        float
            P(duration <= deadline)
        """
        if self.is_deterministic:
            return 1.0 if deadline >= self.mean else 0.0
        return float(st.norm.cdf((deadline - self.mean) / self.std))

    def quantile(self, q):
        """Get the project duration which is met with probability ``q``."""
        if not 0.0 < q < 1.0:
            raise ValueError(f"Probability must be in (0, 1), got {q}")
        if self.is_deterministic:
            return self.mean
        return float(self.mean + self.std * st.norm.ppf(q))

    @property
    def pqe(self):
        """Project duration quantile for the distribution probability level."""
        return self.quantile(self.p)

    def to_dict(self):
        return {
            'mean'       : self.mean,
            'variance'   : self.variance,
            'std'        : self.std,
            'optimistic' : self.optimistic,
            'pessimistic': self.pessimistic,
            'p'          : self.p,
            'pqe'        : self.pqe,
        }

    def __repr__(self):
        return str(self.to_dict())
