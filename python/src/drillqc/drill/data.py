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

"""Row access helpers for drillhole tables.

Tables reach the validators either as pandas DataFrames or as lists of
mappings (one per row). Both are read through the helpers here so every check
sees the same record shape and the same coercion rules.
"""

import re

import pandas as pd

from drillqc.datamodel import ROW_ID, SITE_ID, SITE_ID_FALLBACK_KEYS, UNKNOWN_SITE

# Leading decimal number, optional exponent, or signed Infinity
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def as_records(rows):
    """Return the rows of a table as a list of mappings, without copying values."""
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        return rows.to_dict("records")
    return list(rows)


def header_columns(rows):
    """Column names discovered from the first row of a table.

    A DataFrame exposes its columns; a list of mappings exposes the keys of its
    first row. An empty table has no header.
    """
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        return [] if rows.empty else list(rows.columns)
    rows = list(rows)
    if not rows:
        return []
    return list(rows[0].keys())


def is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))


def safe_float(value):
    """Coerce a scalar to float, reading anything unparsable as 0.0.

    Text is read like a spreadsheet cell: the longest leading number counts and
    trailing text is ignored, so "12m" reads as 12 and "1,5" as 1. Range and
    depth checks all go through this one function. Note that a non-numeric
    string therefore compares as zero rather than being reported.
    """
    if isinstance(value, bool):
        return 0.0
    if pd.api.types.is_number(value):
        number = float(value)
        return 0.0 if pd.isna(number) else number
    match = _LEADING_NUMBER.match(str(value))
    if match is None:
        return 0.0
    return float(match.group(1))


def site_key(row):
    """The row's SITE_ID as used for cross-table matching, or None if blank."""
    value = row.get(SITE_ID)
    return None if is_blank(value) else value


def safe_site_id(row):
    """Display identifier for a row: first non-blank of SITE_ID, HOLE_ID, HOLEID, id."""
    for key in SITE_ID_FALLBACK_KEYS:
        value = row.get(key)
        if not is_blank(value):
            return str(value)
    return UNKNOWN_SITE


def row_id(row, index):
    value = row.get(ROW_ID)
    if is_blank(value):
        return str(index)
    return str(value)


def format_number(value):
    """Render a depth or measurement the way it reads in a spreadsheet (100, not 100.0)."""
    if float(value).is_integer():
        return str(int(value))
    return str(float(value))
