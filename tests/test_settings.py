from pathlib import Path

import pytest

from statement_parser.core import settings


def test_read_config_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "# comment\n"
        "OPENAI_MODEL: gpt-4o-mini  # inline\n"
        "AI_BACKEND_NAME: \"gemini\"\n"
        "EMPTY:\n",
        encoding="utf-8",
    )

    values = settings.read_config_file(str(path))

    assert values == {"OPENAI_MODEL": "gpt-4o-mini", "AI_BACKEND_NAME": "gemini"}


def test_read_config_file_missing() -> None:
    assert settings.read_config_file(None) == {}


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("ON", True), ("0", False), ("no", False), ("maybe", True), ("", True)],
)
def test_get_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("USE_AI_PARSING", raw)
    assert settings.get_env_bool("USE_AI_PARSING", True) is expected


def test_get_env_int_bounds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "0")
    assert settings.get_env_int("MAX_UPLOAD_BYTES", 10, min_value=1) == 10
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "abc")
    assert settings.get_env_int("MAX_UPLOAD_BYTES", 10, min_value=1) == 10
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    assert settings.get_env_int("MAX_UPLOAD_BYTES", 10, min_value=1) == 2048


def test_get_env_float(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AI_TIMEOUT", "2.5")
    assert settings.get_env_float("AI_TIMEOUT", 30.0, min_value=1.0) == 2.5
    monkeypatch.setenv("AI_TIMEOUT", "0.1")
    assert settings.get_env_float("AI_TIMEOUT", 30.0, min_value=1.0) == 30.0


def test_secrets_are_masked() -> None:
    assert settings._mask_env_value("OPENAI_API_KEY", "sk-abcdef123") == "sk...23"
    assert settings._mask_env_value("OPENAI_MODEL", "gpt-4o-mini") == "gpt-4o-mini"


def test_config_path_follows_config_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("UNRELATED_KEY: value\n", encoding="utf-8")
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))

    settings.load_environment()

    assert settings.get_config_path() == str(tmp_path / "config.yaml")
