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
class NetPlannerError(Exception):
    """Base class for all NetPlanner exceptions."""

#==============================================================================
class NetworkError(NetPlannerError, RuntimeError):
    """
    Raised on programming errors in network computations.

    User data problems never raise this exception: they are reported in
    the ``errors`` and ``warnings`` lists of a schedule result. It signals
    that an internal invariant was broken, e.g. the pass engine got a
    cyclic graph or a negative time reserve appeared.
    """

#==============================================================================
class RecordFormatError(NetPlannerError, ValueError):
    """Raised when a record document can not be read at all."""
