"""Tests for the single-file and batch preprocessing runners."""

import json
import logging

import pytest

from racehistory.pipelines.preprocess import (
    collect_inputs,
    default_output_path,
    preprocess_csv,
    process_batch,
    process_file,
)
from racehistory.utils.schema_validation import OutputValidationError


def test_preprocess_csv_ranks_and_builds_timeline(sample_race_csv):
    result = preprocess_csv(sample_race_csv)

    assert len(result.parsed) == 8
    assert [car.start_position for car in result.cars] == [0, 1, 2]
    assert result.time_limit == 3_600_000
    assert len(result.events) == 12


def test_parsed_rows_not_rewritten_by_ranking(sample_race_csv):
    result = preprocess_csv(sample_race_csv)

    assert all(row.lap.position is None for row in result.parsed)
    # raw rows keep their own times as bests
    assert result.parsed[6].lap.best == result.parsed[6].lap.time == 219000
    assert result.cars[0].laps[2].best == 218000


def test_default_output_path(tmp_path):
    assert default_output_path(tmp_path / "spa_6h.csv") == tmp_path / "spa_6h.json"


def test_process_file_writes_document(tmp_path, sample_race_csv):
    source = tmp_path / "le_mans_24h.csv"
    source.write_text(sample_race_csv, encoding="utf-8")

    document = process_file(source, event_names={"le_mans_24h": "24 Hours of Le Mans"})

    written = json.loads((tmp_path / "le_mans_24h.json").read_text(encoding="utf-8"))
    assert written == document
    assert written["name"] == "24 Hours of Le Mans"
    assert written["preprocessed"][1]["carNumber"] == "51"


def test_process_file_validation_failure_writes_nothing(tmp_path, sample_race_csv, monkeypatch):
    source = tmp_path / "spa_6h.csv"
    source.write_text(sample_race_csv)

    def _broken_output(*args, **kwargs):
        return {"name": "spa_6h"}

    monkeypatch.setattr("racehistory.pipelines.preprocess.create_output", _broken_output)

    with pytest.raises(OutputValidationError):
        process_file(source)
    assert not (tmp_path / "spa_6h.json").exists()


def test_collect_inputs_from_directory(tmp_path):
    (tmp_path / "b.csv").write_text("")
    (tmp_path / "a.csv").write_text("")
    (tmp_path / "notes.txt").write_text("")

    assert collect_inputs(tmp_path) == [tmp_path / "a.csv", tmp_path / "b.csv"]
    assert collect_inputs(tmp_path / "a.csv") == [tmp_path / "a.csv"]


def test_batch_isolates_failures(tmp_path, sample_race_csv, caplog):
    good = tmp_path / "imola_6h.csv"
    good.write_text(sample_race_csv)
    missing = tmp_path / "missing.csv"
    binary = tmp_path / "broken.csv"
    binary.write_bytes(b"\xff\xfe\xfa NUMBER;LAP\n")

    with caplog.at_level(logging.ERROR):
        report = process_batch([missing, binary, good])

    assert report.ok is False
    assert set(report.failed) == {missing, binary}
    assert report.written == {good: tmp_path / "imola_6h.json"}
    assert (tmp_path / "imola_6h.json").exists()
    assert "missing.csv" in caplog.text


def test_batch_explicit_output_for_single_input(tmp_path, sample_race_csv):
    source = tmp_path / "fuji_6h.csv"
    source.write_text(sample_race_csv)
    target = tmp_path / "out" / "fuji.json"

    report = process_batch([source], output_path=target, indent=0, validate=False)

    assert report.ok
    assert json.loads(target.read_text())["name"] == "fuji_6h"


def test_batch_rejects_output_path_with_many_inputs(tmp_path):
    with pytest.raises(ValueError, match="exactly one input"):
        process_batch([tmp_path / "a.csv", tmp_path / "b.csv"], output_path=tmp_path / "x.json")


def test_batch_handles_header_only_file(tmp_path, timing_csv):
    source = tmp_path / "empty.csv"
    source.write_text(timing_csv([]))

    report = process_batch([source])

    assert report.ok
    document = json.loads((tmp_path / "empty.json").read_text())
    assert document["laps"] == []
    assert document["timeline_events"] == [{"event_time": "0.000", "event_type": "RaceStart"}]


def test_batch_bad_speed_cell_does_not_stop_siblings(tmp_path, timing_row, timing_csv, caplog):
    bad = tmp_path / "a_bad.csv"
    bad.write_text(timing_csv([timing_row(KPH="nan"), timing_row(LAP_NUMBER="2", KPH="inf")]))
    good = tmp_path / "b_good.csv"
    good.write_text(timing_csv([timing_row()]))

    with caplog.at_level(logging.WARNING):
        report = process_batch([bad, good], validate=False)

    assert report.ok
    assert set(report.written) == {bad, good}
    assert json.loads((tmp_path / "a_bad.json").read_text())["laps"] == []
    assert len(json.loads((tmp_path / "b_good.json").read_text())["laps"]) == 1
    assert "KPH" in caplog.text
