import logging
from pathlib import Path

import pytest

from procsched.models import Process
from procsched.workload_io import (
    MalformedLine,
    UnreadableWorkload,
    WorkloadNotFound,
    load_workload,
    parse_lines,
    process_from_fields,
)


def test_load_text(tmp_path: Path):
    p = tmp_path / "processes.txt"
    p.write_text("0 20\n0 10\n4 6\n4 8\n")
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 20), (0, 10), (4, 6), (4, 8)]
    assert [x.pid for x in procs] == ["P1", "P2", "P3", "P4"]


def test_malformed_line_is_skipped_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="procsched"):
        procs = parse_lines(["0 abc", "1 3", "", "2 5"])
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(1, 3), (2, 5)]
    assert "line 1" in caplog.text
    assert "non-numeric" in caplog.text


def test_extra_tokens_are_reported_but_tolerated(caplog):
    with caplog.at_level(logging.WARNING, logger="procsched"):
        procs = parse_lines(["0 4 9"])
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 4)]
    assert "extra tokens" in caplog.text


@pytest.mark.parametrize("line", ["3 0", "3 -2", "-1 4", "7"])
def test_invalid_records_are_rejected(line):
    assert parse_lines([line, "0 1"]) == [Process("P1", 0, 1)]


def test_process_from_fields_raises_malformed_line():
    with pytest.raises(MalformedLine) as info:
        process_from_fields(["5", "0"], pid="P1", line_number=4)
    assert info.value.line_number == 4
    assert "burst time must be positive" in str(info.value)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadNotFound, match="File not found"):
        load_workload(tmp_path / "nope.txt")


def test_directory_is_unreadable(tmp_path: Path):
    with pytest.raises(UnreadableWorkload):
        load_workload(tmp_path)


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":3},[1,2],{"arrival_time":2}]')
    procs = load_workload(p)
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 3), (1, 2)]


def test_load_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("{not json")
    with pytest.raises(UnreadableWorkload, match="Invalid JSON"):
        load_workload(p)


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n0,3\n1,x\n4,2\n")
    procs = load_workload(p)
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 3), (4, 2)]
    assert procs[1].pid == "P2"


def test_csv_row_with_extra_column_is_tolerated(tmp_path: Path, caplog):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n0,3,9\n1,2\n")
    with caplog.at_level(logging.WARNING, logger="procsched"):
        procs = load_workload(p)
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 3), (1, 2)]
    assert "extra tokens" in caplog.text
    assert "0,3,9" in caplog.text


def test_undecodable_bytes_only_reject_their_line(tmp_path: Path, caplog):
    p = tmp_path / "processes.txt"
    p.write_bytes(b"0 4\n1 \xff\n2 3\n")
    with caplog.at_level(logging.WARNING, logger="procsched"):
        procs = load_workload(p)
    assert [(x.arrival_time, x.burst_time) for x in procs] == [(0, 4), (2, 3)]
    assert "line 2" in caplog.text
