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

"""QA/QC checks for drillhole tables.

Each validator is a pure function of the tables and rules it is given and
returns a fresh list of ``ValidationError`` findings. Nothing here raises on
bad data, and input rows are never modified.
"""

import pandas as pd

from drillqc.datamodel import (
    DEPTH,
    DEPTH_FROM,
    DEPTH_TO,
    DEPTH_TOLERANCE,
    END_DEPTH,
    SITE_ID,
    TableType,
)
from drillqc.drill.data import (
    as_records,
    format_number,
    header_columns,
    is_blank,
    row_id,
    safe_float,
    safe_site_id,
    site_key,
)
from drillqc.drill.findings import CheckCategory, ErrorType, Severity, ValidationError
from drillqc.utils.logging import get_logger

log = get_logger(__name__)

HEADER_ROW = "HEADER"
CONFIG_ROW = "CONFIG"
SYSTEM_SITE = "SYSTEM"


def collar_depths(collars):
    """Map of collar SITE_ID to declared END_DEPTH. Later duplicates shadow earlier ones."""
    depths = {}
    for row in as_records(collars):
        key = site_key(row)
        if key is not None:
            depths[key] = safe_float(row.get(END_DEPTH))
    return depths


def validate_structure(rows, config):
    """One CRITICAL finding per schema-required column absent from the table header."""
    records = as_records(rows)
    if not records:
        return []
    header = set(header_columns(records))
    table = config.table_type
    issues = []
    for column in config.columns:
        if column.is_schema_required and column.column_name not in header:
            issues.append(ValidationError(
                id=CheckCategory.MISSING_COLUMN.make_id(table.value, column.column_name),
                table=table,
                row_id=HEADER_ROW,
                site_id=SYSTEM_SITE,
                column=column.column_name,
                message=f"Missing Column Header: Required column '{column.column_name}' was not found in the table.",
                severity=Severity.CRITICAL,
                type=ErrorType.STRUCTURE,
                category=CheckCategory.MISSING_COLUMN,
            ))
    return issues


def validate_integrity(collars, rows, table_type):
    """Flag child rows whose SITE_ID has no Collar row (orphan records)."""
    table = TableType(table_type)
    valid_sites = {site_key(row) for row in as_records(collars)}
    valid_sites.discard(None)
    issues = []
    for index, row in enumerate(as_records(rows)):
        if site_key(row) in valid_sites:
            continue
        rid = row_id(row, index)
        site_id = safe_site_id(row)
        issues.append(ValidationError(
            id=CheckCategory.ORPHAN.make_id(table.value, rid),
            table=table,
            row_id=rid,
            site_id=site_id,
            column=SITE_ID,
            message=f"Orphan Record: Site ID '{site_id}' does not exist in Collar table.",
            severity=Severity.CRITICAL,
            type=ErrorType.INTEGRITY,
            category=CheckCategory.ORPHAN,
        ))
    return issues


def validate_eoh(collars, rows, table_type):
    """Check interval depths against each hole's declared END_DEPTH.

    Any row whose DEPTH_TO passes END_DEPTH (beyond the tolerance) is CRITICAL.
    Each hole whose deepest in-range interval stops short of END_DEPTH gets one
    bottom coverage finding: CRITICAL, or WARNING if the hole already has a row
    past END_DEPTH. Rows past END_DEPTH do not count towards coverage. Holes
    without a positive END_DEPTH in the collar table are skipped.
    """
    table = TableType(table_type)
    depths = collar_depths(collars)
    deepest_by_site = {}
    over_sites = set()
    issues = []

    for index, row in enumerate(as_records(rows)):
        key = site_key(row)
        total = depths.get(key)
        if total is None or total <= 0:
            continue
        to_val = safe_float(row.get(DEPTH_TO))
        deepest = deepest_by_site.setdefault(key, 0.0)
        if to_val <= total + DEPTH_TOLERANCE:
            if to_val > deepest:
                deepest_by_site[key] = to_val
        else:
            over_sites.add(key)
            rid = row_id(row, index)
            issues.append(ValidationError(
                id=CheckCategory.DEPTH_EXCEEDED.make_id(table.value, rid),
                table=table,
                row_id=rid,
                site_id=safe_site_id(row),
                column=DEPTH_TO,
                message=(
                    f"Depth Exceeded: '{DEPTH_TO}' ({format_number(to_val)}) exceeds "
                    f"Collar {END_DEPTH} ({format_number(total)})."
                ),
                severity=Severity.CRITICAL,
                type=ErrorType.LOGIC,
                category=CheckCategory.DEPTH_EXCEEDED,
            ))

    for key, deepest in deepest_by_site.items():
        total = depths[key]
        if deepest < total - DEPTH_TOLERANCE:
            issues.append(ValidationError(
                id=CheckCategory.BOTTOM_COVERAGE.make_id(table.value, key),
                table=table,
                row_id="",
                site_id=str(key),
                column=DEPTH_TO,
                message=(
                    f"Bottom coverage: deepest sample ({format_number(deepest)}) is shallower "
                    f"than Collar {END_DEPTH} ({format_number(total)})."
                ),
                severity=Severity.WARNING if key in over_sites else Severity.CRITICAL,
                type=ErrorType.LOGIC,
                category=CheckCategory.BOTTOM_COVERAGE,
            ))
    return issues


def validate_survey_depths(collars, surveys):
    """Survey stations deeper than the hole's END_DEPTH are CRITICAL."""
    depths = collar_depths(collars)
    issues = []
    for index, row in enumerate(as_records(surveys)):
        total = depths.get(site_key(row))
        if total is None:
            continue
        depth = safe_float(row.get(DEPTH))
        if depth > total:
            rid = row_id(row, index)
            issues.append(ValidationError(
                id=CheckCategory.SURVEY_DEPTH_EXCEEDED.make_id(rid),
                table=TableType.SURVEY,
                row_id=rid,
                site_id=safe_site_id(row),
                column=DEPTH,
                message=f"Survey Depth {format_number(depth)} exceeds EOH {format_number(total)}.",
                severity=Severity.CRITICAL,
                type=ErrorType.LOGIC,
                category=CheckCategory.SURVEY_DEPTH_EXCEEDED,
            ))
    return issues


def validate_collar_depths(collars):
    """Every collar needs a positive END_DEPTH."""
    issues = []
    for index, row in enumerate(as_records(collars)):
        if safe_float(row.get(END_DEPTH)) > 0:
            continue
        rid = row_id(row, index)
        issues.append(ValidationError(
            id=CheckCategory.COLLAR_DEPTH.make_id(rid),
            table=TableType.COLLAR,
            row_id=rid,
            site_id=safe_site_id(row),
            column=END_DEPTH,
            message=f"Invalid Collar depth ({row.get(END_DEPTH)}). Must be greater than zero.",
            severity=Severity.CRITICAL,
            type=ErrorType.VALUE,
            category=CheckCategory.COLLAR_DEPTH,
        ))
    return issues


def _interval_issue(category, table, rid, site_id, column, message, severity):
    return ValidationError(
        id=category.make_id(table.value, rid),
        table=table,
        row_id=rid,
        site_id=site_id,
        column=column,
        message=message,
        severity=severity,
        type=ErrorType.INTERVAL,
        category=category,
    )


def validate_intervals(rows, table_type):
    """Zero-length, inverted, overlapping and gapped intervals per site.

    Rows are grouped by display site id and stable-sorted on DEPTH_FROM, so
    intervals sharing a start depth keep their input order. Each row is
    compared with its predecessor in that order.
    """
    table = TableType(table_type)
    records = as_records(rows)
    if not records:
        return []

    frame = pd.DataFrame({
        "pos": range(len(records)),
        "site": [safe_site_id(r) for r in records],
        "from": [safe_float(r.get(DEPTH_FROM)) for r in records],
        "to": [safe_float(r.get(DEPTH_TO)) for r in records],
    })

    issues = []
    for site_id, group in frame.groupby("site", sort=False):
        ordered = group.sort_values("from", kind="mergesort")
        prev_to = None
        for pos, f, t in zip(ordered["pos"], ordered["from"], ordered["to"]):
            row = records[pos]
            rid = row_id(row, pos)
            f_txt, t_txt = format_number(f), format_number(t)
            if f == t:
                issues.append(_interval_issue(
                    CheckCategory.ZERO_LENGTH, table, rid, site_id, DEPTH_TO,
                    f"Zero Length: Interval {f_txt} to {t_txt} has no length.",
                    Severity.WARNING,
                ))
            if f > t:
                issues.append(_interval_issue(
                    CheckCategory.INVERTED, table, rid, site_id, DEPTH_FROM,
                    f"Inverted Interval: {DEPTH_FROM} ({f_txt}) is greater than {DEPTH_TO} ({t_txt}).",
                    Severity.CRITICAL,
                ))
            if prev_to is not None:
                prev_txt = format_number(prev_to)
                if f < prev_to:
                    issues.append(_interval_issue(
                        CheckCategory.OVERLAP, table, rid, site_id, DEPTH_FROM,
                        f"Overlap: Starts at {f_txt} but previous ended at {prev_txt}.",
                        Severity.CRITICAL,
                    ))
                elif f > prev_to:
                    issues.append(_interval_issue(
                        CheckCategory.GAP, table, rid, site_id, DEPTH_FROM,
                        f"Gap: Gap detected between {prev_txt} and {f_txt}.",
                        Severity.WARNING,
                    ))
            prev_to = t
    return issues


def _library_index(libraries):
    index = {}
    for library in libraries:
        index.setdefault(library.id, library)
    return index


def _resolve_lookups(config, libraries):
    """Column name -> (library, valid codes) for lookup rules whose library exists."""
    index = _library_index(libraries)
    resolved = {}
    for column in config.columns:
        lookup = column.lookup
        if lookup is None or column.is_numeric:
            continue
        library = index.get(lookup.library_id)
        if library is None:
            log.warning(
                "unresolved_code_library",
                table=config.table_type.value,
                column=column.column_name,
                library_id=lookup.library_id,
            )
            continue
        resolved[column.column_name] = (library, library.codes(lookup.case_sensitive))
    return resolved


def validate_values(rows, config, libraries):
    """Mandatory, range and lookup checks for every configured column of every row."""
    table = config.table_type
    lookups = _resolve_lookups(config, libraries)
    issues = []

    for index, row in enumerate(as_records(rows)):
        rid = row_id(row, index)
        site_id = safe_site_id(row)

        for column in config.columns:
            name = column.column_name
            value = row.get(name)

            if is_blank(value):
                if column.is_mandatory:
                    issues.append(ValidationError(
                        id=CheckCategory.MISSING_VALUE.make_id(table.value, rid, name),
                        table=table,
                        row_id=rid,
                        site_id=site_id,
                        column=name,
                        message=f"Missing Value: Data in '{name}' cannot be empty.",
                        severity=Severity.CRITICAL,
                        type=ErrorType.VALUE,
                        category=CheckCategory.MISSING_VALUE,
                    ))
                continue

            range_rule = column.range
            if range_rule is not None and column.is_numeric:
                number = safe_float(value)
                severity = Severity.CRITICAL if range_rule.strict else Severity.WARNING
                if range_rule.min is not None and number < range_rule.min:
                    issues.append(ValidationError(
                        id=CheckCategory.BELOW_MIN.make_id(table.value, rid, name),
                        table=table,
                        row_id=rid,
                        site_id=site_id,
                        column=name,
                        message=(
                            f"Value Too Low: {format_number(number)} is below minimum "
                            f"{format_number(range_rule.min)}."
                        ),
                        severity=severity,
                        type=ErrorType.VALUE,
                        category=CheckCategory.BELOW_MIN,
                    ))
                if range_rule.max is not None and number > range_rule.max:
                    issues.append(ValidationError(
                        id=CheckCategory.ABOVE_MAX.make_id(table.value, rid, name),
                        table=table,
                        row_id=rid,
                        site_id=site_id,
                        column=name,
                        message=(
                            f"Value Too High: {format_number(number)} is above maximum "
                            f"{format_number(range_rule.max)}."
                        ),
                        severity=severity,
                        type=ErrorType.VALUE,
                        category=CheckCategory.ABOVE_MAX,
                    ))

            if name in lookups:
                library, codes = lookups[name]
                text = format_number(value) if isinstance(value, float) else str(value)
                candidate = text if column.lookup.case_sensitive else text.upper()
                if candidate not in codes:
                    issues.append(ValidationError(
                        id=CheckCategory.INVALID_CODE.make_id(table.value, rid, name),
                        table=table,
                        row_id=rid,
                        site_id=site_id,
                        column=name,
                        message=f"Invalid Code: '{text}' not found in library '{library.name or library.id}'.",
                        severity=Severity.CRITICAL,
                        type=ErrorType.VALUE,
                        category=CheckCategory.INVALID_CODE,
                    ))
    return issues


def validate_library_references(config, libraries):
    """One CONFIG warning per lookup rule that names a library not in ``libraries``."""
    index = _library_index(libraries)
    table = config.table_type
    issues = []
    for column in config.columns:
        lookup = column.lookup
        if lookup is None or column.is_numeric or lookup.library_id in index:
            continue
        issues.append(ValidationError(
            id=CheckCategory.UNRESOLVED_LIBRARY.make_id(table.value, column.column_name),
            table=table,
            row_id=CONFIG_ROW,
            site_id=SYSTEM_SITE,
            column=column.column_name,
            message=(
                f"Unresolved Library: lookup rule on '{column.column_name}' references "
                f"unknown library '{lookup.library_id}'; the check was skipped."
            ),
            severity=Severity.WARNING,
            type=ErrorType.CONFIG,
            category=CheckCategory.UNRESOLVED_LIBRARY,
        ))
    return issues
