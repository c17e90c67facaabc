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

"""Reporting helpers for validation summaries.

Turns a ``ValidationSummary`` into pandas tables for severity-grouped,
searchable listings, and a Plotly bar chart of findings per table.
"""

import pandas as pd
import plotly.graph_objects as go

from drillqc.drill.findings import Severity

ERROR_COLUMNS = ["id", "table", "rowId", "siteId", "column", "message", "severity", "type"]

SEVERITY_ORDER = [Severity.CRITICAL.value, Severity.WARNING.value, Severity.INFO.value]

SEVERITY_COLORS = {
    Severity.CRITICAL.value: "#8b1e3f",
    Severity.WARNING.value: "#d9a441",
    Severity.INFO.value: "#6b7280",
}


def errors_frame(summary):
    """One row per reported finding, ordered CRITICAL first, then by table and site."""
    records = [err.to_dict() for err in summary.errors]
    if not records:
        return pd.DataFrame(columns=ERROR_COLUMNS)
    df = pd.DataFrame.from_records(records, columns=ERROR_COLUMNS)
    df["severity"] = pd.Categorical(df["severity"], categories=SEVERITY_ORDER, ordered=True)
    return df.sort_values(["severity", "table", "siteId"], kind="mergesort").reset_index(drop=True)


def filter_errors(df, severity=None, search=None):
    """Filter an ``errors_frame`` by severity and a case-insensitive text search.

    The search matches against site id, table, column and message.
    """
    out = df
    if severity is not None:
        out = out[out["severity"] == Severity(severity).value]
    if search:
        needle = str(search).lower()
        haystack = (
            out["siteId"].astype(str) + " " + out["table"].astype(str) + " "
            + out["column"].fillna("").astype(str) + " " + out["message"].astype(str)
        ).str.lower()
        out = out[haystack.str.contains(needle, regex=False)]
    return out.reset_index(drop=True)


def counts_by_table(summary):
    """Finding counts per table (rows) and severity (columns)."""
    df = errors_frame(summary)
    if df.empty:
        return pd.DataFrame(columns=SEVERITY_ORDER)
    counts = pd.crosstab(df["table"], df["severity"].astype(str))
    return counts.reindex(columns=SEVERITY_ORDER, fill_value=0)


def plot_error_counts(summary):
    """Stacked horizontal bar chart of findings per table, one trace per severity.

    Returns a plotly.graph_objects.Figure.
    """
    counts = counts_by_table(summary)
    if counts.empty:
        return go.Figure()

    traces = []
    for severity in SEVERITY_ORDER:
        if not counts[severity].any():
            continue
        traces.append(go.Bar(
            orientation="h",
            name=severity,
            x=counts[severity],
            y=counts.index,
            marker=dict(color=SEVERITY_COLORS[severity]),
            hovertemplate=f"%{{y}}: %{{x}} {severity.lower()}<extra></extra>",
        ))

    layout = go.Layout(
        barmode="stack",
        height=max(200, 40 * len(counts) + 80),
        margin=dict(l=120, r=10, t=30, b=30),
        title=dict(text=f"{summary.total_errors} errors, {summary.total_warnings} warnings"),
        xaxis=dict(title="Findings", zeroline=False),
        yaxis=dict(autorange="reversed"),
    )
    return go.Figure(data=traces, layout=layout)
