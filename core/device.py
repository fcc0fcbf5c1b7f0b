# The single IO device and its blocked queue
from collections import deque
from typing import Deque, Optional


class IODevice:
    def __init__(self):
        self.queue: Deque[int] = deque()
        self.active: Optional[int] = None

    def enqueue(self, jid: int):
        self.queue.append(jid)

    def pop_oldest(self) -> Optional[int]:
        if not self.queue:
            return None
        return self.queue.popleft()

    def is_idle(self) -> bool:
        return self.active is None

    def release(self):
        self.active = None

    def __repr__(self):
        return f"IODevice(active={self.active}, queued={len(self.queue)})"
