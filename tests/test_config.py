import pathlib

import pytest

from graphtutor import config, exceptions
from graphtutor.config import io as config_io

# --- Defaults ---


def test_defaults() -> None:
    merged = config.get_merged_config()
    assert merged == config.GraphTutorConfig()
    assert merged.solver.weight_tolerance == 1e-9
    assert merged.solver.max_trails == 10_000
    assert merged.solver.max_odd_vertices == 14
    assert config.get_display_precision() == 5
    assert merged.metrics is False


# --- load_config ---


def test_load_config_missing_file_returns_defaults(tmp_path: pathlib.Path) -> None:
    assert config.load_config(tmp_path / "nonexistent.yaml") == config.GraphTutorConfig()


def test_load_config_empty_file_returns_defaults(tmp_path: pathlib.Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")
    assert config.load_config(config_file) == config.GraphTutorConfig()


def test_load_config_partial_section(tmp_path: pathlib.Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("solver:\n  max_trails: 50\n")

    result = config.load_config(config_file)

    assert result.solver.max_trails == 50
    assert result.solver.max_odd_vertices == 14


@pytest.mark.parametrize(
    ("content", "match"),
    [
        ("invalid: yaml: content: [", "Invalid YAML"),
        ("- just a list", "must be a mapping"),
        ("unknown_section: 1", "Invalid configuration"),
        ("solver:\n  max_odd_vertices: 7", "must be even"),
        ("solver:\n  weight_tolerance: -1", "Invalid configuration"),
        ("display:\n  precision: lots", "Invalid configuration"),
    ],
)
def test_load_config_invalid(tmp_path: pathlib.Path, content: str, match: str) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(content)
    with pytest.raises(exceptions.ConfigError, match=match):
        config.load_config(config_file)


# --- Merging ---


def test_local_overrides_global(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
    global_file = tmp_path / "global.yaml"
    global_file.write_text("solver:\n  max_trails: 10\n  max_odd_vertices: 8\n")
    monkeypatch.setenv(config_io.CONFIG_ENV_VAR, str(global_file))
    (tmp_path / config_io.LOCAL_CONFIG_NAME).write_text("solver:\n  max_trails: 20\n")
    config.clear_config_cache()

    merged = config.get_merged_config()

    assert merged.solver.max_trails == 20
    assert merged.solver.max_odd_vertices == 8


def test_merged_config_is_cached(tmp_path: pathlib.Path) -> None:
    first = config.get_merged_config()
    (tmp_path / config_io.LOCAL_CONFIG_NAME).write_text("metrics: true\n")

    assert config.get_merged_config() is first
    config.clear_config_cache()
    assert config.get_merged_config().metrics is True


def test_global_path_from_env(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(config_io.CONFIG_ENV_VAR, str(tmp_path / "elsewhere.yaml"))
    assert config_io.get_global_config_path() == tmp_path / "elsewhere.yaml"


def test_global_path_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(config_io.CONFIG_ENV_VAR)
    path = config_io.get_global_config_path()
    assert path.parts[-3:] == (".config", "graphtutor", "config.yaml")


def test_deep_merge_does_not_mutate() -> None:
    base = {"solver": {"max_trails": 1, "max_odd_vertices": 2}}
    result = config_io.deep_merge(base, {"solver": {"max_trails": 5}})
    assert result == {"solver": {"max_trails": 5, "max_odd_vertices": 2}}
    assert base["solver"]["max_trails"] == 1


# --- override_config ---


def test_override_config_restores() -> None:
    with config.override_config(solver={"max_trails": 3}) as overridden:
        assert overridden.solver.max_trails == 3
        assert config.get_solver_config().max_trails == 3
    assert config.get_solver_config().max_trails == 10_000


def test_override_config_validates() -> None:
    with pytest.raises(exceptions.ConfigError):
        with config.override_config(solver={"max_odd_vertices": 3}):
            pass
