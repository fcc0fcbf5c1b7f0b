# Final statistics
from dataclasses import dataclass
from typing import List

from core.job import JobTable
from core.system import Measurements


@dataclass(frozen=True)
class Averages:
    turnaround: float
    io: float
    ready: float


def averages(jobs: JobTable) -> Averages:
    n = len(jobs)
    if n == 0:
        return Averages(0.0, 0.0, 0.0)
    return Averages(
        turnaround=sum(j.turnaround_time for j in jobs) / n,
        io=sum(j.io_time for j in jobs) / n,
        ready=sum(j.wait_time for j in jobs) / n,
    )


def format_report(jobs: JobTable, measurements: Measurements) -> List[str]:
    lines = [f"CPU Utilization: {measurements.cpu_utilization:.2f}"]
    for j in jobs:
        lines.append(f"P{j.jid} (TAT = {j.turnaround_time:4d} | Ready = {j.wait_time:4d} | IO = {j.io_time:4d} | CPU = {j.cpu_time:4d})")
    avg = averages(jobs)
    lines.append(f"Average, TOT = {avg.turnaround:f}, IO = {avg.io:f}, READY = {avg.ready:f}")
    return lines
