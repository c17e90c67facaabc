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

"""Validation run orchestration.

``run_validation`` sequences every check over every table type, then
aggregates the findings once and counts them. Tables arrive as a mapping of
table type to rows (DataFrame or list of mappings); rule sets and code
libraries arrive as model instances or as the plain mappings stored by the
configuration store.
"""

from drillqc.datamodel import INTERVAL_TABLES, TableType
from drillqc.drill.aggregate import group_errors, summarize
from drillqc.drill.config import coerce_libraries, coerce_table_configs, find_table_config
from drillqc.drill.data import as_records
from drillqc.drill.validate import (
    validate_collar_depths,
    validate_eoh,
    validate_integrity,
    validate_intervals,
    validate_library_references,
    validate_structure,
    validate_survey_depths,
    validate_values,
)
from drillqc.utils.logging import get_logger, log_context

log = get_logger(__name__)


def _index_tables(tables):
    indexed = {}
    for key, rows in (tables or {}).items():
        try:
            table_type = TableType(key)
        except ValueError:
            raise ValueError(f"Unknown table type: {key!r}") from None
        indexed[table_type] = as_records(rows)
    return indexed


def validate_interval_table(collars, rows, config, libraries):
    """Structure, integrity, EOH, geometry and value checks for one interval table, in that order."""
    table_type = config.table_type
    issues = []
    issues += validate_structure(rows, config)
    issues += validate_integrity(collars, rows, table_type)
    issues += validate_eoh(collars, rows, table_type)
    issues += validate_intervals(rows, table_type)
    issues += validate_values(rows, config, libraries)
    return issues


def run_validation(tables, configs, libraries=(), report_config_issues=False):
    """Validate a drillhole dataset and return the aggregated ``ValidationSummary``.

    Parameters
    ----------
    tables : mapping
        Table type (``TableType`` or its name) to rows. Missing tables read as empty.
    configs : iterable
        Active table rule sets. Interval tables without a rule set are not validated.
    libraries : iterable
        Code libraries referenced by lookup rules.
    report_config_issues : bool
        Emit a CONFIG warning for each lookup rule whose library id does not
        resolve. By default such rules are skipped silently.
    """
    tables = _index_tables(tables)
    configs = coerce_table_configs(configs)
    libraries = coerce_libraries(libraries)

    collars = tables.get(TableType.COLLAR, [])
    issues = []

    def _config_issues(config):
        return validate_library_references(config, libraries) if report_config_issues else []

    collar_config = find_table_config(configs, TableType.COLLAR)
    if collar_config is not None:
        issues += _config_issues(collar_config)
        issues += validate_structure(collars, collar_config)
        issues += validate_values(collars, collar_config, libraries)
        issues += validate_collar_depths(collars)

    surveys = tables.get(TableType.SURVEY, [])
    survey_config = find_table_config(configs, TableType.SURVEY)
    if survey_config is not None:
        issues += _config_issues(survey_config)
        issues += validate_structure(surveys, survey_config)
        issues += validate_values(surveys, survey_config, libraries)
    # survey rows are always checked against the collars, configured or not
    issues += validate_integrity(collars, surveys, TableType.SURVEY)
    issues += validate_survey_depths(collars, surveys)

    for table_type in INTERVAL_TABLES:
        config = find_table_config(configs, table_type)
        if config is None:
            continue
        rows = tables.get(table_type, [])
        with log_context(table=table_type.value):
            table_issues = _config_issues(config) + validate_interval_table(collars, rows, config, libraries)
            log.debug("table_validated", rows=len(rows), findings=len(table_issues))
        issues += table_issues

    summary = summarize(group_errors(issues))
    log.info(
        "validation_complete",
        findings=len(issues),
        reported=len(summary.errors),
        total_errors=summary.total_errors,
        total_warnings=summary.total_warnings,
    )
    return summary


def validate_snapshot(tables, snapshot, report_config_issues=False):
    """Run validation with the configs and libraries of a stored ``RuleSnapshot``."""
    return run_validation(
        tables,
        snapshot.configs,
        snapshot.libraries,
        report_config_issues=report_config_issues,
    )
