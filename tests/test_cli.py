"""Tests for the devsetup command line entry point."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cli.main import build_parser, main


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.root is None
        assert args.defaults is False
        assert args.verbose is False

    def test_flags(self, tmp_path: Path) -> None:
        args = build_parser().parse_args(["--root", str(tmp_path), "--defaults", "-v"])
        assert args.root == tmp_path
        assert args.defaults is True
        assert args.verbose is True


class TestMain:
    def test_unattended_run_exits_zero(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DEVSETUP_READINESS_RETRIES", raising=False)
        (tmp_path / ".env.example").write_text("DATABASE_USER=postgres\nSMTP_PORT=1025\n")
        (tmp_path / "package.json").write_text(json.dumps({"name": "lonestone"}))

        with patch("core.process.subprocess.run", return_value=MagicMock(returncode=0)) as mock_run, \
                pytest.raises(SystemExit) as exc:
            main(["--root", str(tmp_path), "--defaults"])

        assert exc.value.code == 0
        assert json.loads((tmp_path / "package.json").read_text())["name"] == "my-project"
        assert "DATABASE_USER=postgres" in (tmp_path / ".env").read_text()
        assert mock_run.call_count == 1  # lint:fix only, docker declined

    def test_missing_workspace_exits_two(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--root", str(tmp_path / "nope")])

        assert exc.value.code == 2
        assert "Workspace not found" in capsys.readouterr().err

    def test_invalid_settings_exit_two(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("DEVSETUP_READINESS_RETRIES", "0")

        with pytest.raises(SystemExit) as exc:
            main(["--root", str(tmp_path), "--defaults"])

        assert exc.value.code == 2
        assert "Invalid DEVSETUP_* settings" in capsys.readouterr().err
        assert not (tmp_path / ".env").exists()
