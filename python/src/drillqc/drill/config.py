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

"""Validation rule configuration.

Column rules, table rule sets and code libraries are immutable snapshots
passed into each validation run. The configuration store persists them as a
JSON envelope ``{timestamp, version, libraries, configs}`` with camelCase keys,
which these models read and write directly.
"""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from drillqc.datamodel import (
    AZIMUTH,
    DEPTH,
    DEPTH_FROM,
    DEPTH_TO,
    DIP,
    END_DEPTH,
    INTERVAL_TABLES,
    SITE_ID,
    TableType,
)

CONFIG_VERSION = "1.0"


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RangeRule(_Rule):
    """Numeric bounds for a column. Violations are CRITICAL when strict, else WARNING."""

    min: float | None = None
    max: float | None = None
    strict: bool = False


class LookupRule(_Rule):
    """Column values must be codes of the referenced library."""

    library_id: str = Field(alias="libraryId")
    case_sensitive: bool = Field(default=False, alias="caseSensitive")


class ColumnValidation(_Rule):
    range: RangeRule | None = None
    lookup: LookupRule | None = None
    # Values must exist among Collar site identifiers; enforced on SITE_ID by the integrity check
    is_key_reference: bool = Field(default=False, alias="isKeyReference")


class ColumnConfig(_Rule):
    column_name: str = Field(alias="columnName")
    label: str = ""
    is_schema_required: bool = Field(default=False, alias="isSchemaRequired")
    is_mandatory: bool = Field(default=False, alias="isMandatory")
    type: Literal["string", "number", "float"] = "string"
    validation: ColumnValidation | None = None

    @field_validator("column_name")
    @classmethod
    def uppercase_column_name(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def is_numeric(self) -> bool:
        return self.type != "string"

    @property
    def range(self) -> RangeRule | None:
        return self.validation.range if self.validation else None

    @property
    def lookup(self) -> LookupRule | None:
        return self.validation.lookup if self.validation else None


class TableConfig(_Rule):
    table_type: TableType = Field(alias="tableType")
    columns: tuple[ColumnConfig, ...] = ()


class LibraryItem(_Rule):
    code: str
    description: str = ""


class CodeLibrary(_Rule):
    id: str
    name: str = ""
    items: tuple[LibraryItem, ...] = ()

    def codes(self, case_sensitive=False):
        if case_sensitive:
            return {item.code for item in self.items}
        return {item.code.upper() for item in self.items}


class RuleSnapshot(_Rule):
    """The persisted configuration envelope."""

    timestamp: str | None = None
    version: str = CONFIG_VERSION
    libraries: tuple[CodeLibrary, ...] = ()
    configs: tuple[TableConfig, ...] = ()

    def table_config(self, table_type):
        return find_table_config(self.configs, table_type)


def find_table_config(configs, table_type):
    """Return the first rule set for ``table_type``, or None if the table is unconfigured."""
    table_type = TableType(table_type)
    for config in configs:
        if config.table_type == table_type:
            return config
    return None


def coerce_table_configs(configs):
    return tuple(
        c if isinstance(c, TableConfig) else TableConfig.model_validate(c)
        for c in (configs or ())
    )


def coerce_libraries(libraries):
    return tuple(
        lib if isinstance(lib, CodeLibrary) else CodeLibrary.model_validate(lib)
        for lib in (libraries or ())
    )


def load_rule_snapshot(source):
    """Load a configuration envelope from a path, a JSON string, or a mapping.

    Raises ``ValueError`` (``pydantic.ValidationError`` for schema problems)
    when the input is not a valid configuration.
    """
    if isinstance(source, RuleSnapshot):
        return source
    if isinstance(source, Path):
        payload = json.loads(source.read_text(encoding="utf-8"))
    elif isinstance(source, str):
        text = source.strip()
        if text.startswith(("{", "[")):
            payload = json.loads(text)
        else:
            payload = json.loads(Path(source).read_text(encoding="utf-8"))
    elif isinstance(source, dict):
        payload = source
    else:
        raise ValueError(f"Unsupported configuration source: {type(source).__name__}")
    if not isinstance(payload, dict):
        raise ValueError("Configuration must be a JSON object with 'libraries' and 'configs'")
    return RuleSnapshot.model_validate(payload)


def dump_rule_snapshot(snapshot, indent=2):
    return snapshot.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def _key_column():
    return {"columnName": SITE_ID, "label": "Site ID", "isSchemaRequired": True, "isMandatory": True, "type": "string"}


def _float_column(name, label, range_rule=None):
    column = {"columnName": name, "label": label, "isSchemaRequired": True, "isMandatory": True, "type": "float"}
    if range_rule is not None:
        column["validation"] = {"range": range_rule}
    return column


# Shipped defaults: only the key and depth columns the engine itself relies on.
# Value columns (assays, lithology codes, ...) are added by users.
DEFAULT_CONFIGS = [
    {
        "tableType": TableType.COLLAR.value,
        "columns": [
            _key_column(),
            _float_column(END_DEPTH, "Total Depth", {"min": 0, "max": 2000, "strict": True}),
        ],
    },
    {
        "tableType": TableType.SURVEY.value,
        "columns": [
            _key_column(),
            _float_column(DEPTH, "Depth"),
            _float_column(AZIMUTH, "Azimuth", {"min": 0, "max": 360, "strict": True}),
            _float_column(DIP, "Dip", {"min": -90, "max": 90, "strict": True}),
        ],
    },
] + [
    {
        "tableType": table_type.value,
        "columns": [
            _key_column(),
            _float_column(DEPTH_FROM, "Depth From"),
            _float_column(DEPTH_TO, "Depth To"),
        ],
    }
    # ALTERATION and DENSITY are opt-in
    for table_type in INTERVAL_TABLES
    if table_type not in (TableType.ALTERATION, TableType.DENSITY)
]


def default_rule_snapshot():
    return RuleSnapshot.model_validate({"version": CONFIG_VERSION, "libraries": [], "configs": DEFAULT_CONFIGS})
