from __future__ import annotations

from unittest.mock import patch

from ledger_clean.services.progress import ScanProgress, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


def test_bar_created_on_tty():
    with patch("ledger_clean.services.progress.is_tty_enabled", return_value=True), patch(
        "ledger_clean.services.progress.tqdm"
    ) as mock_tqdm:
        with ScanProgress(12, description="items") as progress:
            progress.advance()
            progress.advance()
        mock_tqdm.assert_called_once()
        kwargs = mock_tqdm.call_args.kwargs
        assert kwargs["total"] == 12
        assert kwargs["unit"] == "line"
        assert kwargs["desc"] == "items"
        bar = mock_tqdm.return_value
        assert bar.update.call_count == 2
        bar.close.assert_called_once()
        assert progress.lines_done == 2


def test_no_bar_without_tty():
    with patch("ledger_clean.services.progress.is_tty_enabled", return_value=False), patch(
        "ledger_clean.services.progress.tqdm"
    ) as mock_tqdm:
        progress = ScanProgress(3)
        progress.advance()
        progress.close()
        mock_tqdm.assert_not_called()
        assert progress.pbar is None
        assert progress.lines_done == 1
