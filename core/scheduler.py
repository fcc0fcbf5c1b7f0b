# Round Robin ready queue and CPU occupancy
from collections import deque
from typing import Deque, Optional, Tuple

from core.event import EventType
from core.job import Job


class Scheduler:
    def __init__(self, time_quantum: int):
        self.time_quantum = time_quantum
        self.ready_queue: Deque[int] = deque()
        self.running: Optional[int] = None

    def enqueue_ready(self, jid: int):
        self.ready_queue.append(jid)

    def pick_next(self) -> Optional[int]:
        if self.ready_queue:
            return self.ready_queue.popleft()
        return None

    def is_idle(self) -> bool:
        return self.running is None

    def release(self):
        self.running = None

    def plan_burst(self, job: Job) -> Tuple[EventType, int]:
        """Return the event that ends the job's current CPU slice and how far away it is."""
        burst = job.front_burst()
        if burst > self.time_quantum:
            return EventType.PREEMPT, self.time_quantum
        if job.is_last_burst():
            return EventType.TERMINATE, burst
        return EventType.IO_REQUEST, burst
