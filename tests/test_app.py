from __future__ import annotations

import json
import logging

import pytest

from scholarport import app, config


@pytest.fixture
def data_dir(monkeypatch, tmp_path, scholarships, goals, profile):
    directory = tmp_path / "data"
    monkeypatch.setenv(config.DATA_DIR_ENV, str(directory))
    config.save_portfolio(scholarships, goals)
    config.save_profile(profile)
    yield directory
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and str(directory) in handler.baseFilename:
            root.removeHandler(handler)
            handler.close()


def test_export_writes_file_with_format_extension(data_dir, tmp_path) -> None:
    out = tmp_path / "exports"

    assert app.main(["export", "--format", "json", "--out", str(out), "--name", "My Portfolio"]) == 0

    [written] = list(out.iterdir())
    assert written.name == "my-portfolio.json"
    payload = json.loads(written.read_text(encoding="utf-8"))
    assert payload["exportType"] == "portfolio"
    assert payload["metadata"]["totalScholarships"] == 3


def test_import_saves_resolved_portfolio(data_dir, tmp_path) -> None:
    source = tmp_path / "new.csv"
    source.write_text("Scholarship Name,Amount,Deadline\nBrand New,$400,2030-01-01\n", encoding="utf-8")

    assert app.main(["import", str(source)]) == 0

    scholarships, goals = config.load_portfolio()
    assert [s.name for s in scholarships][-1] == "Brand New"
    assert len(goals) == 1


def test_importing_the_same_export_twice_keeps_one_goal(data_dir, tmp_path) -> None:
    out = tmp_path / "exports"
    assert app.main(["export", "--type", "full-backup", "--financial", "--out", str(out), "--name", "backup"]) == 0
    backup = out / "backup.json"

    assert app.main(["import", str(backup)]) == 0
    assert app.main(["import", str(backup)]) == 0

    scholarships, goals = config.load_portfolio()
    assert len(scholarships) == 3
    assert [(g.id, g.title) for g in goals] == [("g-1", "Sophomore tuition")]


def test_export_pdf_writes_binary_document(data_dir, tmp_path) -> None:
    out = tmp_path / "exports"

    assert app.main(["export", "--format", "pdf", "--out", str(out), "--name", "portfolio"]) == 0

    assert (out / "portfolio.pdf").read_bytes().startswith(b"%PDF")


def test_rejected_import_leaves_portfolio_alone(data_dir, tmp_path) -> None:
    source = tmp_path / "bad.json"
    source.write_text("{broken", encoding="utf-8")

    assert app.main(["import", str(source)]) == 1
    assert len(config.load_portfolio()[0]) == 3


def test_stats_runs(data_dir) -> None:
    assert app.main(["stats"]) == 0


def test_bad_column_mapping_is_reported(data_dir, tmp_path) -> None:
    source = tmp_path / "rows.csv"
    source.write_text("A,100,2030-01-01\n", encoding="utf-8")

    assert app.main(["import", str(source), "--no-headers", "--map", "Amount=one"]) == 2
