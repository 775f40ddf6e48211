from __future__ import annotations

from importlib import import_module

import pytest


def test_bugreporter_dunder_all_exports() -> None:
    module = import_module("bugreporter")
    exported = set(module.__all__)
    expected = {
        "BugReporter",
        "BugFields",
        "ReporterConfig",
        "load_config",
        "BugReporterError",
        "ConfigNotFoundError",
        "ConfigParseError",
        "MissingRequiredFieldError",
        "InvalidArgumentError",
        "NetworkError",
        "RemoteApiError",
        "ResponseParseError",
        "__version__",
    }
    assert expected <= exported
    for name in exported:
        assert hasattr(module, name)


@pytest.mark.parametrize(
    "attribute, expected_type",
    [
        ("load_config", "function"),
        ("ReporterConfig", "type"),
        ("BugReporter", "type"),
        ("BugFields", "type"),
    ],
)
def test_public_attributes(attribute: str, expected_type: str) -> None:
    module = import_module("bugreporter")
    value = getattr(module, attribute)
    if expected_type == "function":
        assert callable(value)
    else:
        assert isinstance(value, type)


def test_version_matches_pyproject() -> None:
    from pathlib import Path

    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    module = import_module("bugreporter")
    assert f'version = "{module.__version__}"' in pyproject.read_text(encoding="utf-8")
