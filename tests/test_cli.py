"""Tests for the aucpr command line."""

from pathlib import Path

import pytest

from aucpr.cli import main


def test_single_list_file(perfect_list: str, capsys) -> None:
    assert main([perfect_list]) == 0
    out = capsys.readouterr().out
    assert "Area Under the Curve for Precision - Recall is 1.0" in out
    assert "Area Under the Curve for ROC is 1.0" in out


def test_single_file_with_output_prefix(perfect_list: str, tmp_path: Path) -> None:
    prefix = tmp_path / "result"
    assert main(["-o", str(prefix), perfect_list]) == 0
    for ext in (".opr", ".pr", ".spr", ".roc"):
        assert Path(f"{prefix}{ext}").exists()


def test_pr_file_with_counts(write_source, capsys) -> None:
    path = write_source("points.pr", "0.5 0.5\n")
    assert main(["-t", "PR", "-p", "10", "-n", "10", path]) == 0
    line = capsys.readouterr().out.splitlines()[0]
    assert float(line.rsplit(" ", 1)[-1]) == pytest.approx(0.5)


def test_pr_file_without_counts_fails(write_source, capsys) -> None:
    path = write_source("points.pr", "0.5 0.5\n")
    assert main(["-t", "pr", path]) == 1
    assert "pos_count" in capsys.readouterr().err


def test_missing_file_fails(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing.txt")]) == 1
    assert "Cannot open" in capsys.readouterr().err


def test_multiple_files_are_averaged(
    perfect_list: str, inverted_list: str, tmp_path: Path, capsys
) -> None:
    prefix = tmp_path / "avg"
    assert main(["-o", str(prefix), perfect_list, inverted_list]) == 0
    out = capsys.readouterr().out
    assert f"Processing '{perfect_list}'" in out
    assert "Vertically averaged totals:" in out
    assert Path(f"{prefix}.pr").exists()
    assert Path(f"{prefix}.roc").exists()
    assert not Path(f"{prefix}.spr").exists()


def test_multiple_files_require_list_type(perfect_list: str, inverted_list: str) -> None:
    assert main(["-t", "roc", "-p", "4", "-n", "4", perfect_list, inverted_list]) == 1


def test_min_recall_out_of_range(perfect_list: str) -> None:
    assert main(["-r", "1.5", perfect_list]) == 1


def test_unknown_type_exits(perfect_list: str) -> None:
    with pytest.raises(SystemExit):
        main(["-t", "xml", perfect_list])


def test_unwritable_output_leaves_no_files(perfect_list: str, tmp_path: Path, capsys) -> None:
    """A target that cannot be written aborts the export before any file appears."""
    prefix = tmp_path / "out"
    Path(f"{prefix}.spr").mkdir()
    assert main(["-o", str(prefix), perfect_list]) == 1
    assert "is a directory" in capsys.readouterr().err
    assert sorted(p.name for p in tmp_path.iterdir() if p.name.startswith("out")) == [
        "out.spr"
    ]
