# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Record Sources

Adapters that read task records and the team roster from issue trackers
for the health analysis pipeline.
"""

from .base import BaseRecordSource
from .clickup import ClickUpRecordSource
from .in_memory import InMemoryRecordSource

__all__ = [
    "BaseRecordSource",
    "ClickUpRecordSource",
    "InMemoryRecordSource",
]
