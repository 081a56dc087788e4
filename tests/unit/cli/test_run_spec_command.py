"""Unit tests for run-spec CLI command."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import main
from tests.fixture_paths import fixture_path


def test_run_spec_command_executes_steps_in_order(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """run-spec should run, list, and show from one YAML file."""
    spec_path = tmp_path / "pipeline.yaml"
    spec_path.write_text(
        "version: 1\n"
        "defaults:\n"
        f"  data_root: {tmp_path / 'store'}\n"
        "  dataset: spec-cli\n"
        "steps:\n"
        f"  - command: run\n    source: {fixture_path('ticks/two_days.csv')}\n"
        "    momentum_lag: 1\n"
        "  - command: versions\n"
        "  - command: show\n",
        encoding="utf-8",
    )

    exit_code = main(["run-spec", str(spec_path)])
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert lines[0].startswith("spec-cli-")
    assert lines[1].startswith(lines[0] + "\t")
    assert lines[2:] == ["date,market_momentum", "2020-01-02,", "2020-01-03,5.0"]


def test_run_spec_command_reports_missing_dataset(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Steps without a dataset should fail with a run-spec error."""
    spec_file = str(fixture_path("run_spec/missing_dataset.yaml"))
    exit_code = main(["--data-root", str(tmp_path), "run-spec", spec_file])

    assert exit_code == 1
    assert "requires dataset" in capsys.readouterr().err


def test_run_spec_command_rejects_zero_momentum_lag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A lag of zero rows should fail before anything is stored."""
    spec_path = tmp_path / "pipeline.yaml"
    spec_path.write_text(
        "version: 1\n"
        "steps:\n"
        f"  - command: run\n    dataset: zero-lag\n    source: {fixture_path('ticks/two_days.csv')}\n"
        "    momentum_lag: 0\n",
        encoding="utf-8",
    )

    exit_code = main(["--data-root", str(tmp_path / "store"), "run-spec", str(spec_path)])

    assert exit_code == 1
    assert "momentum_lag" in capsys.readouterr().err
    assert not (tmp_path / "store" / "datasets" / "zero-lag").exists()
