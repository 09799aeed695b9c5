"""Tests for core.process - external command execution."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from core.process import CommandFailed, LaunchFailed, ProcessError, run_command


@pytest.fixture(autouse=True)
def _no_path_lookup():
    """Keep the executable name as given so call args are predictable."""
    with patch("core.process.shutil.which", return_value=None):
        yield


class TestRunCommand:
    """Live-output command runner."""

    def test_success(self, tmp_path: Path) -> None:
        with patch("core.process.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_command("pnpm", ["lint:fix"], tmp_path)

        mock_run.assert_called_once_with(["pnpm", "lint:fix"], cwd=tmp_path)

    def test_output_is_not_captured(self, tmp_path: Path) -> None:
        with patch("core.process.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_command("pnpm", ["docker:up"], tmp_path)

        kwargs = mock_run.call_args.kwargs
        assert "capture_output" not in kwargs
        assert "stdout" not in kwargs

    def test_non_zero_exit_raises_command_failed(self, tmp_path: Path) -> None:
        with patch("core.process.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=3)
            with pytest.raises(CommandFailed) as exc_info:
                run_command("pnpm", ["--filter=api", "db:migrate:up"], tmp_path)

        assert exc_info.value.exit_code == 3
        assert exc_info.value.command == "pnpm --filter=api db:migrate:up"

    def test_missing_executable_raises_launch_failed(self, tmp_path: Path) -> None:
        with patch("core.process.subprocess.run", side_effect=FileNotFoundError("pnpm")):
            with pytest.raises(LaunchFailed) as exc_info:
                run_command("pnpm", ["dev"], tmp_path)

        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_failures_share_base_class(self) -> None:
        assert issubclass(CommandFailed, ProcessError)
        assert issubclass(LaunchFailed, ProcessError)

    def test_prints_command_line(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("core.process.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_command("pnpm", ["lint:fix"], tmp_path)

        assert "pnpm lint:fix" in capsys.readouterr().out

    def test_uses_resolved_executable(self, tmp_path: Path) -> None:
        with patch("core.process.shutil.which", return_value="/usr/bin/pnpm"), \
                patch("core.process.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            run_command("pnpm", ["dev"], tmp_path)

        assert mock_run.call_args.args[0] == ["/usr/bin/pnpm", "dev"]
