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

"""Validation findings and the run summary.

Every finding carries a check category. The category fixes the id prefix
(so ids are reproducible from table, row and column alone) and the summary
message used when the aggregator collapses several findings into one.
"""

from dataclasses import dataclass, field
from enum import Enum

from drillqc.datamodel import TableType


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class ErrorType(str, Enum):
    STRUCTURE = "STRUCTURE"
    INTEGRITY = "INTEGRITY"
    LOGIC = "LOGIC"
    INTERVAL = "INTERVAL"
    VALUE = "VALUE"
    # Only produced when configuration problems are explicitly requested
    CONFIG = "CONFIG"


class CheckCategory(Enum):
    MISSING_COLUMN = ("struct", "{count} missing column headers in table {table}.")
    ORPHAN = ("int", "{count} orphan records for site {site}.")
    DEPTH_EXCEEDED = ("eoh", "{count} intervals exceeded EOH on site {site}.")
    SURVEY_DEPTH_EXCEEDED = ("eoh-surv", "{count} survey stations exceeded EOH on site {site}.")
    BOTTOM_COVERAGE = ("eohbot", "{count} bottom-of-hole coverage issues on site {site}.")
    ZERO_LENGTH = ("zero", "{count} zero-length intervals on site {site}.")
    INVERTED = ("inv", "{count} inverted intervals on site {site}.")
    OVERLAP = ("ovl", "{count} overlapping intervals on site {site}.")
    GAP = ("gap", "{count} gaps between intervals on site {site}.")
    MISSING_VALUE = ("req", "{count} missing values in {column} on site {site}.")
    BELOW_MIN = ("min", "{count} values in {column} below minimum on site {site}.")
    ABOVE_MAX = ("max", "{count} values in {column} above maximum on site {site}.")
    INVALID_CODE = ("lookup", "{count} invalid codes in {column} on site {site}.")
    COLLAR_DEPTH = ("collar-depth", "{count} invalid collar depths on site {site}.")
    UNRESOLVED_LIBRARY = ("cfg", "{count} unresolved code libraries in table {table}.")

    def __init__(self, prefix, template):
        self.prefix = prefix
        self.template = template

    def make_id(self, *parts):
        return "-".join([self.prefix, *(str(p) for p in parts)])


@dataclass(frozen=True)
class ValidationError:
    """One data-quality finding. Never raised; collected into a summary."""

    id: str
    table: TableType
    row_id: str
    site_id: str
    message: str
    severity: Severity
    type: ErrorType
    category: CheckCategory
    column: str | None = None

    def grouped_message(self, count):
        return self.category.template.format(
            count=count,
            site=self.site_id,
            table=self.table.value,
            column=self.column or "",
        )

    def to_dict(self):
        out = {
            "id": self.id,
            "table": self.table.value,
            "rowId": self.row_id,
            "siteId": self.site_id,
        }
        if self.column is not None:
            out["column"] = self.column
        out.update({
            "message": self.message,
            "severity": self.severity.value,
            "type": self.type.value,
        })
        return out


@dataclass(frozen=True)
class ValidationSummary:
    total_errors: int
    total_warnings: int
    errors: tuple = field(default_factory=tuple)

    def to_dict(self):
        return {
            "totalErrors": self.total_errors,
            "totalWarnings": self.total_warnings,
            "errors": [err.to_dict() for err in self.errors],
        }
