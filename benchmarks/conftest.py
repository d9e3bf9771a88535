"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def large_script() -> str:
    """Generate a large batch-like script (~120KB) with `; name=value` lines."""
    sections = []
    for i in range(2000):
        sections.append(
            f"@echo off\r\n"
            f"fn step_{i}()\r\n"
            f"{{-\r\n"
            f"\t; VAR_{i}=value {i}\r\n"
            f"\tcall  (  target_{i} )\r\n"
            f"-}}\r\n"
        )
    return "".join(sections)
