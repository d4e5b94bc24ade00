"""Tests for CLI module."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import fec_line

from contribution_search.cli import _format_amount, main


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "data"
    directory.mkdir()
    lines = [
        fec_line(name="SMITH, JOHN", state="NY", transaction_dt="01152020", transaction_amt="100"),
        fec_line(name="SMITH, JON", state="NJ", transaction_dt="02012020", transaction_amt="50"),
        fec_line(name="DOE, JANE", state="CA", transaction_dt="03012020", transaction_amt="7000"),
    ]
    (directory / "itcont.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
    return directory


class TestFormatAmount:
    """Tests for _format_amount helper function."""

    def test_format(self) -> None:
        assert _format_amount(0) == "$0.00"
        assert _format_amount(1234.5) == "$1,234.50"


class TestCLIArguments:
    """Tests for CLI argument parsing."""

    def test_missing_command(self) -> None:
        """Missing subcommand should exit with error."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code != 0

    def test_bulk_requires_names_file(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["bulk"])
        assert exc_info.value.code != 0

    def test_invalid_limit(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = main(["search", "smith", "--data-dir", str(data_dir), "--limit", "0"])
        assert result == 1
        assert "limit" in capsys.readouterr().err

    def test_missing_data_dir(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = main(["search", "smith", "--data-dir", str(tmp_path / "nope")])
        assert result == 1
        assert "ERROR" in capsys.readouterr().err

    def test_invalid_amount(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Malformed amount bounds are reported, not ignored."""
        result = main(["search", "smith", "--data-dir", str(data_dir), "--min-amount", "lots"])
        assert result == 1
        assert "minAmount" in capsys.readouterr().err


class TestSearchCommand:
    """Tests for the search subcommand."""

    def test_search(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = main(["search", "smith", "--data-dir", str(data_dir)])
        assert result == 0
        out = capsys.readouterr().out
        assert "Matches: 2" in out
        assert "SMITH, JOHN" in out

    def test_search_with_filters(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = main(["search", "smith", "--data-dir", str(data_dir), "--state", "nj"])
        assert result == 0
        out = capsys.readouterr().out
        assert "Matches: 1" in out
        assert "SMITH, JON" in out


class TestBulkCommand:
    """Tests for the bulk subcommand."""

    def test_bulk_with_output(
        self, data_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        names_file = tmp_path / "names.txt"
        names_file.write_text("Smith\n\nNobody\n", encoding="utf-8")
        output = tmp_path / "out" / "matches.csv"

        result = main(
            ["bulk", str(names_file), "--data-dir", str(data_dir), "--output", str(output)]
        )

        assert result == 0
        out = capsys.readouterr().out
        assert "Names searched: 2" in out
        assert "With results: 1" in out
        lines = output.read_text(encoding="utf-8").split("\n")
        assert lines[0].startswith("cmte_id,amndt_ind")
        assert len(lines) == 3

    def test_empty_names_file(
        self, data_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        names_file = tmp_path / "names.txt"
        names_file.write_text("\n  \n", encoding="utf-8")
        result = main(["bulk", str(names_file), "--data-dir", str(data_dir)])
        assert result == 1
        assert "No valid names" in capsys.readouterr().err


class TestAnalyticsCommand:
    """Tests for the analytics subcommand."""

    def test_analytics(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        result = main(["analytics", "--data-dir", str(data_dir)])
        assert result == 0
        out = capsys.readouterr().out
        assert "Contributions: 3" in out
        assert "Risk: 1 high, 0 medium, 2 low" in out
