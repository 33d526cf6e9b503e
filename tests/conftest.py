from __future__ import annotations

import pathlib
import sys
from typing import TYPE_CHECKING

import click.testing
import pytest

from graphtutor import metrics
from graphtutor.config import io as config_io
from graphtutor.graph import Graph

# Add tests directory to sys.path so helpers.py can be imported
_tests_dir = pathlib.Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))

if TYPE_CHECKING:
    from collections.abc import Generator

# Worked example used throughout: degrees A=3 B=3 C=3 D=3 E=4, total weight 44.
EXAMPLE_EDGES = [
    ("A", "B", 9),
    ("A", "D", 6),
    ("A", "E", 3),
    ("B", "C", 8),
    ("B", "E", 5),
    ("C", "D", 7),
    ("C", "E", 4),
    ("D", "E", 2),
]


@pytest.fixture(autouse=True)
def reset_graphtutor_state(
    tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Reset global graphtutor state between tests.

    Points the global config at a missing file and runs each test from its
    own tmp_path so no user or project config leaks in. Clears the merged
    config cache and collected metrics.
    """
    monkeypatch.setenv(config_io.CONFIG_ENV_VAR, str(tmp_path / "missing-config.yaml"))
    monkeypatch.delenv("GRAPHTUTOR_METRICS", raising=False)
    monkeypatch.chdir(tmp_path)
    config_io.clear_config_cache()
    metrics.clear()
    original_enabled = metrics._enabled
    yield
    config_io.clear_config_cache()
    metrics.clear()
    metrics._enabled = original_enabled


@pytest.fixture
def example_graph() -> Graph:
    """Five-vertex weighted graph with odd vertices A, B, C, D."""
    return Graph.from_edge_list(EXAMPLE_EDGES)


@pytest.fixture
def triangle() -> Graph:
    """Complete Euclidean triangle: AB=1, BC=2, AC=3."""
    return Graph.from_edge_list([("A", "B", 1), ("B", "C", 2), ("A", "C", 3)])


@pytest.fixture
def runner() -> click.testing.CliRunner:
    """Create a CLI runner for testing."""
    return click.testing.CliRunner()
