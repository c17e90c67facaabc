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

"""Collapse repeated findings and count the result.

One systemic problem, such as a wrong total depth on a collar, would otherwise
produce a line per affected row. Findings that share table, site, column,
type, severity and check category are merged into a single entry listing all
of the original row ids.
"""

from dataclasses import replace

from drillqc.drill.findings import Severity, ValidationSummary


def group_key(error):
    return (
        error.table,
        error.site_id,
        error.column or "",
        error.type,
        error.severity,
        error.category,
    )


def group_errors(errors):
    """Merge findings with the same grouping key, keeping first-occurrence order.

    Singleton groups pass through untouched. A merged entry keeps the first
    member's id and fields, joins every member's row id with commas, and
    replaces the message with the category's summary text.
    """
    groups = {}
    for error in errors:
        groups.setdefault(group_key(error), []).append(error)

    grouped = []
    for members in groups.values():
        first = members[0]
        if len(members) == 1:
            grouped.append(first)
            continue
        grouped.append(replace(
            first,
            row_id=",".join(member.row_id for member in members),
            message=first.grouped_message(len(members)),
        ))
    return grouped


def summarize(errors):
    errors = tuple(errors)
    return ValidationSummary(
        total_errors=sum(1 for e in errors if e.severity == Severity.CRITICAL),
        total_warnings=sum(1 for e in errors if e.severity == Severity.WARNING),
        errors=errors,
    )
