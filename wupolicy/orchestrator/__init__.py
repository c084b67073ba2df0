# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/orchestrator/__init__.py
from .orchestrator import Orchestrator, render_summary, scheduled_settings

__all__ = ["Orchestrator", "render_summary", "scheduled_settings"]
