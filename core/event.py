import heapq
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class EventType(IntEnum):
    # value is the tie-break priority for events due on the same tick
    TERMINATE = 0
    ARRIVE = 1
    IO_RECEIVE = 2
    IO_REQUEST = 3
    PREEMPT = 4


@dataclass(order=True, frozen=True)
class Event:
    time: int
    type: EventType
    order: int
    jid: int = field(compare=False)

    def __repr__(self):
        return f"Event(time={self.time}, type={self.type.name}, pid={self.jid})"


class EventQueue:
    """Min-heap of pending events keyed by (time, type, insertion order)."""

    def __init__(self):
        self._heap: List[Event] = []
        self._event_counter = 0

    def push(self, time: int, etype: EventType, jid: int) -> Event:
        self._event_counter += 1
        ev = Event(time=int(time), type=etype, order=self._event_counter, jid=jid)
        heapq.heappush(self._heap, ev)
        return ev

    def pop(self) -> Optional[Event]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)

    def next_time(self) -> Optional[int]:
        return self._heap[0].time if self._heap else None

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)
