"""
Semantic test: read mode reports absence and emptiness distinctly.

Invariant:
Reading before any cache run prints a "does not exist" message, reading an
empty store prints an "is empty" message; neither is an error.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from price_sampler.sampling.runtime.entrypoint import main


def test_read_before_any_cache_run(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "result.txt"

    main(["--mode=read", f"--result-path={path}"])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Selected mode: Read",
        "The result.txt file does not exist. Run in cache mode first.",
    ]


def test_read_empty_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "result.txt"
    path.touch()

    main(["--mode=read", f"--result-path={path}"])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Selected mode: Read",
        "The result.txt file is empty. Run in cache mode first.",
    ]


def test_read_prints_stored_line(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "result.txt"
    path.write_text("Final aggregate of USD prices of BTC: 64123.5\n", encoding="utf-8")

    main(["--mode=read", f"--result-path={path}"])

    out = capsys.readouterr().out.splitlines()
    assert out[-1] == "Final aggregate of USD prices of BTC: 64123.5"


def test_read_directory_path_reports_missing_result(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "result.txt"
    path.mkdir()

    main(["--mode=read", f"--result-path={path}"])

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Selected mode: Read",
        "The result.txt file does not exist. Run in cache mode first.",
    ]
