# Copyright (C) 2026 Darkmine Pty Ltd
# SPDX-License-Identifier: GPL-3.0-or-later

from . import aggregate, config, data, engine, findings, report, validate
from .engine import run_validation, validate_snapshot

__all__ = [
	"aggregate",
	"config",
	"data",
	"engine",
	"findings",
	"report",
	"validate",
	"run_validation",
	"validate_snapshot",
]
