"""Tests for scripts/process_nem12_locally.py - Local NEM12 to SQL converter."""

import json
import shutil
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from process_nem12_locally import build_processor, format_duration, main, process_nem12_file  # noqa: E402


@pytest.fixture
def sample_copy(tmp_path: Path, nem12_sample_file: str) -> Path:
    """Sample file copied into tmp_path so default outputs land there."""
    return Path(shutil.copy(nem12_sample_file, tmp_path / "sample.csv"))


class TestFormatDuration:
    """Tests for format_duration."""

    def test_milliseconds(self) -> None:
        assert format_duration(250) == "250ms"

    def test_seconds(self) -> None:
        assert format_duration(2500) == "2.5s"

    def test_minutes(self) -> None:
        assert format_duration(125_000) == "2m 5s"


class TestBuildProcessor:
    """Tests for build_processor."""

    def test_flags_override_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SQL_INCLUDE_ID", raising=False)
        monkeypatch.delenv("SQL_PARAMETERIZED", raising=False)

        processor = build_processor(include_id=True, parameterized=True, max_size_mb=1)

        assert processor.sql_generator.include_id is True
        assert processor.sql_generator.parameterized is True
        assert processor.file_validator.max_file_size == 1024 * 1024

    def test_environment_flags_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SQL_INCLUDE_ID", "true")

        assert build_processor().sql_generator.include_id is True


class TestProcessNem12File:
    """Tests for process_nem12_file."""

    def test_stream_and_whole_file_agree(self, nem12_duplicates_file: str) -> None:
        processor = build_processor()

        whole = process_nem12_file(nem12_duplicates_file, processor)
        streamed = process_nem12_file(nem12_duplicates_file, processor, stream=True)

        assert streamed.sql_statements == whole.sql_statements
        assert streamed.summary.register_stats == {"R1": 48, "R2": 48}


class TestMain:
    """Tests for the main entry point."""

    def test_default_sql_output(self, sample_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(sample_copy)]) == 0

        sql_lines = sample_copy.with_suffix(".sql").read_text(encoding="utf-8").splitlines()
        assert len(sql_lines) == 192
        assert sql_lines[0].startswith("INSERT INTO meter_readings (nmi, timestamp, consumption) VALUES ('NEM1201009'")

        out = capsys.readouterr().out
        assert "Total Records:        192" in out
        assert "original" in out

    def test_all_outputs(self, sample_copy: Path, tmp_path: Path) -> None:
        sql_path = tmp_path / "out.sql"
        csv_path = tmp_path / "readings.csv"
        json_path = tmp_path / "summary.json"

        exit_code = main(
            [str(sample_copy), "-o", str(sql_path), "--csv", str(csv_path), "--json", str(json_path), "--stream", "-q"]
        )

        assert exit_code == 0
        assert sql_path.exists()

        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        assert list(df.columns) == ["nmi", "register", "ts", "consumption"]
        assert len(df) == 192
        assert df["consumption"].iloc[0] == "0.461"

        doc = json.loads(json_path.read_text(encoding="utf-8"))
        assert "sqlStatements" not in doc
        assert doc["summary"]["nmis"] == ["NEM1201009", "NEM1201010"]

    def test_parameterized_json_has_parameters(self, sample_copy: Path, tmp_path: Path) -> None:
        json_path = tmp_path / "summary.json"

        assert main([str(sample_copy), "--parameterized", "--json", str(json_path), "-q"]) == 0

        doc = json.loads(json_path.read_text(encoding="utf-8"))
        assert doc["sqlParameters"][0] == ["NEM1201009", "2005-03-01 00:00:00", "0.461"]
        assert sample_copy.with_suffix(".sql").read_text(encoding="utf-8").startswith(
            "INSERT INTO meter_readings (nmi, timestamp, consumption) VALUES (%s, %s, %s);"
        )

    def test_line_errors_printed(
        self, tmp_path: Path, nem12_errors_file: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = Path(shutil.copy(nem12_errors_file, tmp_path / "errors.csv"))

        assert main([str(path)]) == 0

        out = capsys.readouterr().out
        assert "Line Errors (4 total):" in out
        assert "  - Line 7: Unknown NEM12 record type: 400" in out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "missing.csv")]) == 1
        assert "Error: File not found" in capsys.readouterr().out

    def test_rejected_extension(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "meter.txt"
        path.write_text("100,NEM12\n900\n", encoding="utf-8")

        assert main([str(path)]) == 1
        assert "Error: File must be a CSV file" in capsys.readouterr().out
        assert not path.with_suffix(".sql").exists()

    def test_rejected_size(self, sample_copy: Path, capsys: pytest.CaptureFixture[str]) -> None:
        sample_copy.write_bytes(sample_copy.read_bytes() * 3000)

        assert main([str(sample_copy), "--max-size-mb", "1", "--stream"]) == 1
        assert "File size must be less than 1MB" in capsys.readouterr().out

    @pytest.mark.parametrize("stream_flag", [[], ["--stream"]])
    def test_undecodable_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str], stream_flag: list[str]) -> None:
        path = tmp_path / "meter.csv"
        path.write_bytes(b"100,NEM12\n200,M1,,,,,,kWh,30,\n300,20050301,\xff\xfe\n900\n")

        assert main([str(path), *stream_flag]) == 1
        out = capsys.readouterr().out
        assert "Error: Failed to process NEM file: " in out
        assert "codec can't decode" in out
        assert not path.with_suffix(".sql").exists()
