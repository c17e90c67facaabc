# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2026 Darkmine Pty Ltd

# This file is part of drillqc.

# drillqc is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# drillqc is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with drillqc.  If not, see <https://www.gnu.org/licenses/>.

"""
drillqc Data Model

Canonical column names and table types shared by every validator.

Rows reach the engine already normalized: headers are uppercase, the hole key
is collapsed onto SITE_ID, interval bounds onto DEPTH_FROM / DEPTH_TO, and every
row carries a unique ROW_ID.
"""

from enum import Enum

ROW_ID = "id"
SITE_ID = "SITE_ID"
HOLE_ID = "HOLE_ID"
HOLEID = "HOLEID"
END_DEPTH = "END_DEPTH"
DEPTH = "DEPTH"
DEPTH_FROM = "DEPTH_FROM"
DEPTH_TO = "DEPTH_TO"
AZIMUTH = "AZIMUTH"
DIP = "DIP"

# Checked in order when a row needs a display identifier for reporting
SITE_ID_FALLBACK_KEYS = (SITE_ID, HOLE_ID, HOLEID, ROW_ID)
UNKNOWN_SITE = "Unknown"

# Depth comparisons against END_DEPTH absorb floating point noise up to this amount
DEPTH_TOLERANCE = 0.01


class TableType(str, Enum):
    COLLAR = "COLLAR"
    SURVEY = "SURVEY"
    LITHOLOGY = "LITHOLOGY"
    ASSAY = "ASSAY"
    MINERALIZATION = "MINERALIZATION"
    OXIDATION = "OXIDATION"
    GEOTECH = "GEOTECH"
    RQD = "RQD"
    VEIN = "VEIN"
    ALTERATION = "ALTERATION"
    DENSITY = "DENSITY"


# Interval tables in the order the engine validates them
INTERVAL_TABLES = (
    TableType.LITHOLOGY,
    TableType.ASSAY,
    TableType.MINERALIZATION,
    TableType.OXIDATION,
    TableType.GEOTECH,
    TableType.RQD,
    TableType.VEIN,
    TableType.ALTERATION,
    TableType.DENSITY,
)
