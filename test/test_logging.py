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

"""Tests for structured logging setup."""

import structlog

from drillqc.utils.logging import configure_logging, get_logger, log_context


def test_configure_logging_json_output():
    try:
        configure_logging(level="warning", json_output=True)
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert config["cache_logger_on_first_use"] is True
    finally:
        structlog.reset_defaults()


def test_configure_logging_console_output():
    try:
        configure_logging(level="DEBUG")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
    finally:
        structlog.reset_defaults()


def test_log_context_binds_table_for_the_block():
    with log_context(table="ASSAY"):
        assert structlog.contextvars.get_contextvars()["table"] == "ASSAY"
    assert "table" not in structlog.contextvars.get_contextvars()
    assert get_logger(__name__) is not None
