"""
Tests for importstory/cli.py
"""

from pathlib import Path

import pytest
import yaml

from importstory.cli import (
    EXIT_LOAD_FAILED,
    EXIT_NO_DATA,
    EXIT_OK,
    main,
    parse_args,
    settings_from_args,
)
from importstory.data.schemas import Metric


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "imports.csv"
    path.write_text(
        "Country,Year,Month,Quantity,Value\n"
        "USA,2024,1,100,1000\n"
        "USA,2024,2,150,1200\n"
        "China,2024,1,500,5000\n"
        "China,2024,2,400,4300\n",
        encoding="utf-8",
    )
    return path


class TestParseArgs:
    """Tests for argument parsing and settings overrides."""

    def test_flags_override_settings(self) -> None:
        args = parse_args(["--variant", "reveal", "--metric", "value", "--top-n", "3"])
        settings = settings_from_args(args)
        assert settings.variant == "reveal"
        assert settings.default_metric == Metric.VALUE
        assert settings.top_n == 3

    def test_unknown_variant_rejected(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--variant", "carousel"])

    @pytest.mark.parametrize("top_n", ["0", "-2", "three"])
    def test_top_n_must_be_positive(self, top_n: str, capsys) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--top-n", top_n])
        assert "--top-n" in capsys.readouterr().err


class TestMain:
    """End-to-end runs of the command line tool."""

    def test_writes_story(self, csv_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "story.html"
        code = main(["--data", str(csv_file), "--output", str(output)])

        assert code == EXIT_OK
        html = output.read_text(encoding="utf-8")
        assert "window.STORY_DATA" in html

    def test_export_narratives(self, csv_file: Path, tmp_path: Path) -> None:
        export = tmp_path / "narratives.yaml"
        code = main([
            "--data", str(csv_file),
            "--output", str(tmp_path / "story.html"),
            "--variant", "reveal",
            "--export-narratives", str(export),
        ])

        assert code == EXIT_OK
        narratives = yaml.safe_load(export.read_text(encoding="utf-8"))["narratives"]
        assert list(narratives) == ["intro", "reveal"]

    def test_snapshots(self, csv_file: Path, tmp_path: Path) -> None:
        snapshots = tmp_path / "snaps"
        code = main([
            "--data", str(csv_file),
            "--output", str(tmp_path / "story.html"),
            "--snapshots", str(snapshots),
        ])

        assert code == EXIT_OK
        assert len(list(snapshots.glob("*.png"))) == 4

    def test_missing_file_writes_error_page(self, tmp_path: Path) -> None:
        output = tmp_path / "story.html"
        code = main(["--data", str(tmp_path / "missing.csv"), "--output", str(output)])

        assert code == EXIT_LOAD_FAILED
        html = output.read_text(encoding="utf-8")
        assert "The data could not be loaded" in html
        assert "missing.csv" in html

    def test_no_valid_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.csv"
        path.write_text("Country,Year,Month,Quantity,Value\nUSA,2024,1,,\n", encoding="utf-8")
        output = tmp_path / "story.html"

        code = main(["--data", str(path), "--output", str(output)])
        assert code == EXIT_NO_DATA
        assert not output.exists()
