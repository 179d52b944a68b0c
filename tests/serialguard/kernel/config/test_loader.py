"""Tests for configuration loading."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from serialguard.kernel.config.loader import ConfigLoader, clear_config_cache, load_config
from serialguard.kernel.exceptions import ConfigurationError, ResolveError
from serialguard.kernel.scanning.classifier import get_entries, is_plain

ENV_VARS = (
    "SERIALGUARD_CONFIG_PATH",
    "SERIALGUARD_WARN_AFTER",
    "SERIALGUARD_DISABLE_CACHE",
    "SERIALGUARD_LOG_LEVEL",
    "SERIALGUARD_LOG_FORMAT",
    "SERIALGUARD_LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Run each test in an empty directory with a cold cache and no env overrides."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    yield
    clear_config_cache()


def write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestPyprojectDiscovery:
    """[tool.serialguard] in pyproject.toml."""

    def test_loads_section_from_cwd(self, tmp_path: Path) -> None:
        write(
            tmp_path / "pyproject.toml",
            """
[tool.serialguard]
ignored_actions = ["persist/REHYDRATE"]
ignored_paths = ["session.socket", "uploads.*.handle"]
warn_after = 64

[tool.serialguard.logging]
level = "WARNING"
format = "console"
""",
        )

        config = load_config()

        assert config.middleware.ignored_actions == frozenset({"persist/REHYDRATE"})
        assert config.middleware.ignored_paths == frozenset(
            {("session", "socket"), ("uploads", "*", "handle")}
        )
        assert config.middleware.warn_after == 64
        assert config.logging.level == "WARNING"
        assert config.logging.format == "console"

    def test_pyproject_without_section_uses_defaults(self, tmp_path: Path) -> None:
        write(tmp_path / "pyproject.toml", '[project]\nname = "app"\n')

        config = load_config()

        assert config.middleware.warn_after == 32.0
        assert config.logging.level == "INFO"

    def test_parent_directory_is_searched(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write(tmp_path / "pyproject.toml", "[tool.serialguard]\ndisable_cache = true\n")
        nested = tmp_path / "src" / "app"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = load_config()

        assert config.middleware.disable_cache is True

    def test_no_file_returns_defaults(self) -> None:
        config = load_config(None)

        assert config.middleware.ignored_paths == frozenset()

    def test_missing_explicit_path_returns_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "missing.toml")

        assert config.middleware.warn_after == 32.0


class TestExplicitFiles:
    """Standalone TOML and kind: Config YAML files."""

    def test_flat_toml_file(self, tmp_path: Path) -> None:
        path = write(tmp_path / "serialguard.toml", "ignore_state = true\nwarn_after = 5\n")

        config = load_config(path)

        assert config.middleware.ignore_state is True
        assert config.middleware.warn_after == 5

    def test_yaml_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GUARD_THRESHOLD", "80")
        path = write(
            tmp_path / "serialguard.yaml",
            """
kind: Config
spec:
  ignored_action_paths:
    - meta.arg
  warn_after: "${GUARD_THRESHOLD}"
  logging:
    level: DEBUG
""",
        )

        config = load_config(path)

        assert config.middleware.ignored_action_paths == frozenset({("meta", "arg")})
        assert config.middleware.warn_after == 80
        assert config.logging.level == "DEBUG"

    def test_yaml_requires_config_kind(self, tmp_path: Path) -> None:
        path = write(tmp_path / "pipeline.yaml", "kind: Pipeline\nspec: {}\n")

        with pytest.raises(ConfigurationError, match="kind: Config"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = write(tmp_path / "broken.yaml", "kind: [Config\n")

        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = write(tmp_path / "broken.toml", "warn_after = \n")

        with pytest.raises(ConfigurationError, match="invalid TOML"):
            load_config(path)

    def test_env_path_is_used(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write(tmp_path / "guard.toml", "ignore_actions = true\n")
        monkeypatch.setenv("SERIALGUARD_CONFIG_PATH", str(path))

        config = load_config()

        assert config.middleware.ignore_actions is True

    def test_results_are_cached_until_cleared(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", "warn_after = 1\n")
        first = load_config(path)
        write(path, "warn_after = 2\n")

        assert load_config(path) is first

        clear_config_cache()
        assert load_config(path).middleware.warn_after == 2


class TestInvalidOptions:
    """Option errors surface as ConfigurationError."""

    def test_unknown_option(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", "warn_afer = 10\n")

        with pytest.raises(ConfigurationError, match="guard.toml"):
            load_config(path)

    def test_negative_threshold(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", "warn_after = -5\n")

        with pytest.raises(ConfigurationError, match="non-negative"):
            load_config(path)

    def test_logging_must_be_a_table(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", 'logging = "DEBUG"\n')

        with pytest.raises(ConfigurationError, match="'logging' must be a table"):
            load_config(path)


class TestCallableOptions:
    """Classifier and enumerator named by import path."""

    def test_import_paths_are_resolved(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "guard.toml",
            'is_serializable = "serialguard.kernel.scanning.classifier:is_plain"\n'
            'get_entries = "serialguard.kernel.scanning.classifier.get_entries"\n',
        )

        config = load_config(path)

        assert config.middleware.is_serializable is is_plain
        assert config.middleware.get_entries is get_entries

    def test_unresolvable_path(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", 'is_serializable = "no_such_module.check"\n')

        with pytest.raises(ResolveError, match="no_such_module"):
            load_config(path)


class TestEnvironmentOverrides:
    """SERIALGUARD_* variables take precedence over files."""

    def test_middleware_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write(tmp_path / "guard.toml", "warn_after = 10\ndisable_cache = false\n")
        monkeypatch.setenv("SERIALGUARD_WARN_AFTER", "250")
        monkeypatch.setenv("SERIALGUARD_DISABLE_CACHE", "yes")

        config = load_config(path)

        assert config.middleware.warn_after == 250
        assert config.middleware.disable_cache is True

    def test_invalid_override_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = write(tmp_path / "guard.toml", "warn_after = 10\n")
        monkeypatch.setenv("SERIALGUARD_WARN_AFTER", "soon")
        monkeypatch.setenv("SERIALGUARD_DISABLE_CACHE", "maybe")

        config = load_config(path)

        assert config.middleware.warn_after == 10
        assert config.middleware.disable_cache is False

    def test_logging_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write(tmp_path / "guard.toml", "[logging]\nlevel = \"INFO\"\n")
        monkeypatch.setenv("SERIALGUARD_LOG_LEVEL", "debug")
        monkeypatch.setenv("SERIALGUARD_LOG_FORMAT", "JSON")
        monkeypatch.setenv("SERIALGUARD_LOG_FILE", "logs/guard.log")

        config = load_config(path)

        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.logging.output_file == "logs/guard.log"


class TestEnvSubstitution:
    """${VAR} placeholders."""

    def test_missing_variable_keeps_placeholder(self) -> None:
        loader = ConfigLoader()

        result = loader._substitute_env_vars({"a": ["${SERIALGUARD_TEST_UNSET_VAR}"], "b": 1})

        assert result == {"a": ["${SERIALGUARD_TEST_UNSET_VAR}"], "b": 1}

    def test_nested_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SLICE", "session")
        loader = ConfigLoader()

        result = loader._substitute_env_vars({"ignored_paths": ["${SLICE}.socket"]})

        assert result == {"ignored_paths": ["session.socket"]}


class TestLoggingSection:
    """The nested logging table."""

    def test_unknown_logging_option(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", "[logging]\ncolour = true\n")

        with pytest.raises(ConfigurationError, match="unknown logging options"):
            load_config(path)

    def test_partial_logging_table_keeps_defaults(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", "[logging]\ninclude_timestamp = false\n")

        config = load_config(path)

        assert config.logging.include_timestamp is False
        assert config.logging.level == "INFO"

    def test_unknown_level_in_file(self, tmp_path: Path) -> None:
        path = write(tmp_path / "guard.toml", '[logging]\nlevel = "LOUD"\n')

        with pytest.raises(ConfigurationError, match="logging level must be one of"):
            load_config(path)

    def test_unknown_format_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write(tmp_path / "guard.toml", "warn_after = 10\n")
        monkeypatch.setenv("SERIALGUARD_LOG_FORMAT", "xml")

        with pytest.raises(ConfigurationError, match="logging format must be one of"):
            load_config(path)
