"""Shared fixtures for the typedconf test suite."""

from __future__ import annotations

import textwrap
from typing import Any

import pytest
import yaml

from typedconf.config import Config


@pytest.fixture
def sample_data() -> dict[str, Any]:
    """A JSON-shaped tree with every container kind the accessors handle."""
    return {
        "name": "app",
        "debug": True,
        "port": 8080,
        "ratio": 0.75,
        "timeout": 30.0,
        "empty": "",
        "nothing": None,
        "db": {"host": "localhost", "port": 5432, "user": "admin"},
        "servers": [
            {"host": "a.example", "port": 80},
            {"host": "b.example", "port": 81},
        ],
        "ids": [1, 2, 3],
        "mixed_ids": [1, "2", 3.0],
        "tags": ["x", "y", "z"],
        "mixed": ["a", 1, True, 2.5, None],
        "limits": {"cpu": 2, "mem": "512"},
        "matrix": [[1, 2], [3, 4]],
        "dotted.key": "verbatim",
    }


@pytest.fixture
def config(sample_data: dict[str, Any]) -> Config:
    """A lock-guarded config without caching or env parsing."""
    return Config(sample_data)


@pytest.fixture
def yaml_data() -> dict[str, Any]:
    """A YAML-decoded tree whose nested maps carry integer and boolean keys."""
    content = textwrap.dedent(
        """
        codes:
          200: ok
          404: missing
        flags:
          true: on_value
          false: off_value
        ports:
          1: 8001
          2: 8002
        nested:
          3:
            name: three
        """
    )
    return yaml.safe_load(content)


@pytest.fixture
def yaml_config(yaml_data: dict[str, Any]) -> Config:
    return Config(yaml_data)
