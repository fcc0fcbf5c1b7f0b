from collections import deque
from enum import Enum, auto
from typing import Deque, Iterator, List, Sequence

from core.errors import InvariantViolation


class JobState(Enum):
    NEW = auto()
    READY = auto()
    RUNNING = auto()
    BLOCKED = auto()
    TERMINATED = auto()


class Job:
    def __init__(self, jid: int, arrival_time: int, bursts: Sequence[int]):
        self.jid = jid
        self.arrival_time = arrival_time
        self.initial_bursts = tuple(bursts)
        # front element is whatever is left of the current burst
        self.bursts: Deque[int] = deque(bursts)
        self.state = JobState.NEW
        self.turnaround_time = 0
        self.wait_time = 0
        self.io_time = 0

    def front_burst(self) -> int:
        if not self.bursts:
            raise InvariantViolation(f"P{self.jid} has no bursts left")
        return self.bursts[0]

    def is_last_burst(self) -> bool:
        return len(self.bursts) == 1

    @property
    def cpu_time(self) -> int:
        """Total CPU demand, i.e. the sum of the original even-indexed bursts."""
        return sum(self.initial_bursts[0::2])

    def __repr__(self) -> str:
        return (f"Job(jid={self.jid}, state={self.state.name}, arrival={self.arrival_time}, "
                f"bursts={list(self.bursts)})")


class JobTable:
    """Dense job storage indexed by job id."""

    def __init__(self):
        self._jobs: List[Job] = []

    def add(self, arrival_time: int, bursts: Sequence[int]) -> Job:
        job = Job(len(self._jobs), arrival_time, bursts)
        self._jobs.append(job)
        return job

    def get(self, jid: int) -> Job:
        if not 0 <= jid < len(self._jobs):
            raise InvariantViolation(f"Job with id = {jid} could not be found")
        return self._jobs[jid]

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self._jobs)

    def __repr__(self) -> str:
        return f"JobTable({len(self._jobs)} jobs)"
