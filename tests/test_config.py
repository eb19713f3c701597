"""Tests for notes_api.config."""

from pathlib import Path

from notes_api.config import Settings


def test_defaults(monkeypatch) -> None:
    for var in ("NOTES_FILE", "API_PORT", "MCP_PORT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.notes_file == Path("data") / "notes.json"
    assert s.api_port == 8000
    assert s.mcp_port == 8001
    assert s.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NOTES_FILE", str(tmp_path / "n.json"))
    monkeypatch.setenv("API_PORT", "9000")
    monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:3000"]')
    s = Settings(_env_file=None)
    assert s.notes_file == tmp_path / "n.json"
    assert s.api_port == 9000
    assert s.cors_origins == ["http://localhost:3000"]
