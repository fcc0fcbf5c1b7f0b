# Workload and quantum parsing
import os
import re
from typing import Iterable, List, Tuple, Union

from core.errors import ConfigError, WorkloadError
from core.job import JobTable


INTEGER = re.compile(r'-?\d+', re.ASCII)


def parse_job_line(line: str) -> Tuple[int, List[int]]:
    """Parse `<arrival> <cpu_burst_count> <burst...>` into (arrival, bursts)."""
    parts = re.split(r'\s+', line.strip())
    if not all(INTEGER.fullmatch(p) for p in parts):
        raise WorkloadError("non-integer field")
    numbers = [int(p) for p in parts]
    if len(numbers) < 3:
        raise WorkloadError("expected arrival, burst count and at least one burst")
    arrival, cpu_burst_count, bursts = numbers[0], numbers[1], numbers[2:]
    if arrival < 1:
        raise WorkloadError(f"arrival time must be at least 1, got {arrival}")
    if cpu_burst_count < 1:
        raise WorkloadError(f"cpu burst count must be at least 1, got {cpu_burst_count}")
    if len(bursts) != 2 * cpu_burst_count - 1:
        raise WorkloadError(f"expected {2 * cpu_burst_count - 1} bursts, got {len(bursts)}")
    if any(b <= 0 for b in bursts):
        raise WorkloadError("bursts must be positive")
    return arrival, bursts


def _decode(raw: Union[str, bytes]) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        raise WorkloadError("invalid encoding") from None


def parse_workload_lines(lines: Iterable[Union[str, bytes]]) -> Tuple[JobTable, List[Tuple[str, str]]]:
    """Build a job table from workload lines.

    Lines may be text or raw bytes; a line that is not valid UTF-8 is
    rejected on its own. Returns the table and the rejected lines as
    (line, reason) pairs. Blank lines and lines starting with '#' are ignored.
    """
    jobs = JobTable()
    rejected: List[Tuple[str, str]] = []
    for raw in lines:
        try:
            line = _decode(raw).rstrip('\r\n')
        except WorkloadError as exc:
            rejected.append((raw.decode('utf-8', 'replace').rstrip('\r\n'), str(exc)))
            continue
        if not line.strip() or line.strip().startswith('#'):
            continue
        try:
            arrival, bursts = parse_job_line(line)
        except WorkloadError as exc:
            rejected.append((line, str(exc)))
            continue
        jobs.add(arrival, bursts)
    return jobs, rejected


def parse_workload(path: str) -> Tuple[JobTable, List[Tuple[str, str]]]:
    if not os.path.exists(path) or os.path.isdir(path):
        raise ConfigError(f"Invalid Input File Path: {path}")
    try:
        with open(path, 'rb') as fh:
            return parse_workload_lines(fh)
    except OSError as exc:
        raise ConfigError(f"Unable to read input file {path}: {exc}") from exc


def parse_quantum(text: str) -> int:
    if not INTEGER.fullmatch(text.strip()):
        raise ConfigError(f"Invalid CPU Quantum Provided: {text!r}")
    quantum = int(text.strip())
    if quantum <= 0:
        raise ConfigError(f"CPU quantum must be positive, got {quantum}")
    return quantum
