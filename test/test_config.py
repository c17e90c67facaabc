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

"""Tests for rule configuration loading and export."""

import json

import pytest

from drillqc.datamodel import INTERVAL_TABLES, TableType
from drillqc.drill.config import (
    ColumnConfig,
    RuleSnapshot,
    default_rule_snapshot,
    dump_rule_snapshot,
    find_table_config,
    load_rule_snapshot,
)

STORED_CONFIG = {
    "timestamp": "2024-01-01T00:00:00.000Z",
    "version": "1.0",
    "libraries": [
        {"id": "lith", "name": "Lithology", "items": [
            {"code": "QZ", "description": "Quartz"},
            {"code": "bif", "description": "Banded iron formation"},
        ]},
    ],
    "configs": [
        {
            "tableType": "LITHOLOGY",
            "columns": [
                {"columnName": "site_id", "label": "Site ID", "isSchemaRequired": True, "isMandatory": True, "type": "string"},
                {"columnName": "Lith_Code", "label": "Lithology", "isMandatory": False, "type": "string",
                 "validation": {"lookup": {"libraryId": "lith", "caseSensitive": False}}},
            ],
        },
        {
            "tableType": "SURVEY",
            "columns": [
                {"columnName": "AZIMUTH", "label": "Azimuth", "isSchemaRequired": True, "isMandatory": True,
                 "type": "float", "validation": {"range": {"min": 0, "max": 360, "strict": True}}},
            ],
        },
    ],
}


def test_load_from_mapping_normalizes_column_names():
    snapshot = load_rule_snapshot(STORED_CONFIG)
    lith = snapshot.table_config(TableType.LITHOLOGY)
    assert [c.column_name for c in lith.columns] == ["SITE_ID", "LITH_CODE"]
    assert lith.columns[1].lookup.library_id == "lith"
    assert lith.columns[1].lookup.case_sensitive is False
    assert lith.columns[1].range is None


def test_load_from_json_text_and_path(tmp_path):
    text = json.dumps(STORED_CONFIG)
    path = tmp_path / "rules.json"
    path.write_text(text, encoding="utf-8")
    from_text = load_rule_snapshot(text)
    assert load_rule_snapshot(path) == from_text
    assert load_rule_snapshot(str(path)) == from_text
    assert from_text.timestamp == "2024-01-01T00:00:00.000Z"


def test_dump_uses_camel_case_keys():
    snapshot = load_rule_snapshot(STORED_CONFIG)
    payload = json.loads(dump_rule_snapshot(snapshot))
    column = payload["configs"][1]["columns"][0]
    assert column["columnName"] == "AZIMUTH"
    assert column["isSchemaRequired"] is True
    assert column["validation"]["range"] == {"min": 0.0, "max": 360.0, "strict": True}
    assert load_rule_snapshot(payload) == snapshot


def test_library_codes_case_folding():
    library = load_rule_snapshot(STORED_CONFIG).libraries[0]
    assert library.codes() == {"QZ", "BIF"}
    assert library.codes(case_sensitive=True) == {"QZ", "bif"}


def test_unknown_table_type_rejected():
    with pytest.raises(ValueError):
        load_rule_snapshot({"configs": [{"tableType": "CORE_PHOTOS", "columns": []}]})


def test_non_object_json_rejected():
    with pytest.raises(ValueError, match="JSON object"):
        load_rule_snapshot("[1, 2]")


def test_rules_are_frozen():
    column = ColumnConfig(column_name="au_ppm", type="float")
    assert column.column_name == "AU_PPM"
    with pytest.raises(ValueError):
        column.is_mandatory = True


def test_find_table_config_returns_none_when_unconfigured():
    snapshot = load_rule_snapshot(STORED_CONFIG)
    assert find_table_config(snapshot.configs, "ASSAY") is None
    assert find_table_config(snapshot.configs, "SURVEY").table_type == TableType.SURVEY


def test_default_snapshot_covers_standard_tables():
    snapshot = default_rule_snapshot()
    assert isinstance(snapshot, RuleSnapshot)
    configured = [c.table_type for c in snapshot.configs]
    assert configured[:2] == [TableType.COLLAR, TableType.SURVEY]
    assert TableType.ALTERATION not in configured
    assert TableType.DENSITY not in configured
    assert len(configured) == 2 + len(INTERVAL_TABLES) - 2
    end_depth = snapshot.table_config("COLLAR").columns[1]
    assert end_depth.column_name == "END_DEPTH"
    assert end_depth.range.strict is True
    assert end_depth.range.max == 2000
