from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .models import Process

logger = logging.getLogger(__name__)

# DictReader key for values beyond the header columns.
_EXTRA_FIELDS = "_extra"


class WorkloadError(ValueError):
    """Base class for problems with a workload file."""


class WorkloadNotFound(WorkloadError):
    pass


class UnreadableWorkload(WorkloadError):
    pass


class MalformedLine(WorkloadError):
    """A single record that cannot become a Process. Never fatal on its own."""

    def __init__(self, line_number: int, text: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}: {text!r}")
        self.line_number = line_number
        self.text = text
        self.reason = reason


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects.

    ``.json`` and ``.csv`` files are read as structured records; anything
    else is the plain text format with one ``<arrival> <burst>`` pair per
    line. Malformed records are logged and skipped.
    """
    path = Path(path)
    if not path.exists():
        raise WorkloadNotFound(f"File not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return _load_json(path)
        if suffix == ".csv":
            return _load_csv(path)
        return _load_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise UnreadableWorkload(f"Cannot read {path}: {exc}") from exc


def parse_lines(lines: Iterable[str]) -> List[Process]:
    processes: List[Process] = []
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue
        tokens = text.split()
        if len(tokens) > 2:
            logger.warning("Bad formatted input on line %d, extra tokens ignored: %r", line_number, text)
        _collect(processes, line_number, text, tokens[:2])
    return processes


def _load_text(path: Path) -> List[Process]:
    # Undecodable bytes become U+FFFD so only their own line is rejected.
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return parse_lines(f)


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise UnreadableWorkload(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise UnreadableWorkload("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for number, entry in enumerate(raw, start=1):
        if isinstance(entry, dict):
            fields = [entry.get("arrival_time"), entry.get("burst_time")]
        else:
            fields = list(entry) if isinstance(entry, list) else [entry]
        _collect(processes, number, json.dumps(entry), fields)
    return processes


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", errors="replace", newline="") as f:
        reader = csv.DictReader(f, restkey=_EXTRA_FIELDS)
        for row in reader:
            extra = row.pop(_EXTRA_FIELDS, [])
            text = ",".join([v or "" for v in row.values()] + extra)
            if extra:
                logger.warning("Bad formatted input on line %d, extra tokens ignored: %r", reader.line_num, text)
            fields = [row.get("arrival_time"), row.get("burst_time")]
            _collect(processes, reader.line_num, text, fields)
    return processes


def _collect(processes: List[Process], line_number: int, text: str, fields: Sequence) -> None:
    pid = f"P{len(processes) + 1}"
    try:
        processes.append(process_from_fields(fields, pid=pid, line_number=line_number, text=text))
    except MalformedLine as exc:
        logger.warning("Skipping malformed record, %s", exc)


def process_from_fields(
    fields: Sequence,
    pid: str,
    line_number: int = 0,
    text: Optional[str] = None,
) -> Process:
    """
    Build a Process from ``[arrival_time, burst_time]`` or raise MalformedLine.
    """
    text = " ".join(str(f) for f in fields) if text is None else text
    if len(fields) < 2:
        raise MalformedLine(line_number, text, "expected arrival and burst time")

    try:
        arrival_time = _to_int(fields[0])
        burst_time = _to_int(fields[1])
    except (TypeError, ValueError) as exc:
        raise MalformedLine(line_number, text, "non-numeric value") from exc

    if arrival_time < 0:
        raise MalformedLine(line_number, text, "arrival time must not be negative")
    if burst_time <= 0:
        raise MalformedLine(line_number, text, "burst time must be positive")

    return Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time)


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise TypeError("boolean is not a time value")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value} is not a whole time unit")
    if isinstance(value, str):
        return int(value.strip())
    return int(value)
