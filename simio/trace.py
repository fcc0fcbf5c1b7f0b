# Trace and log writer
from typing import IO, List, Sequence


class Trace:
    """Writes `<tick>: <message>` lines to every attached stream.

    `streams` receive the trace proper (transitions, snapshots). `log_streams`
    additionally receive diagnostics that are not part of the trace: idle
    ticks, verbose enqueue/handle lines and fatal errors. Everything written
    is also kept in memory so callers can inspect a run without files.
    """

    def __init__(self, streams: Sequence[IO[str]] = (), log_streams: Sequence[IO[str]] = ()):
        self.streams = list(streams)
        self.log_streams = list(log_streams)
        self.lines: List[str] = []
        self.log_lines: List[str] = []

    def _targets(self) -> List[IO[str]]:
        seen = []
        for s in self.streams + self.log_streams:
            if not any(s is t for t in seen):
                seen.append(s)
        return seen

    def _write(self, text: str, targets):
        for s in targets:
            print(text, file=s)

    def emit(self, time: int, message: str):
        line = f"{time}: {message}"
        self.lines.append(line)
        self.log_lines.append(line)
        self._write(line, self._targets())

    def log(self, time: int, message: str):
        line = f"{time}: {message}"
        self.log_lines.append(line)
        self._write(line, self.log_streams)

    def fatal(self, time: int, message: str):
        self.log(time, f"[FATAL]: {message}")

    def snapshot(self, snap):
        cpu = f"CPU = P{snap.cpu}, Burst = {snap.cpu_burst}" if snap.cpu is not None else "CPU = NULL"
        io = f"IO  = P{snap.io}, Burst = {snap.io_burst}" if snap.io is not None else "IO  = null"
        ready = ", ".join(f"P{jid}" for jid in snap.ready)
        blocked = ", ".join(f"P{jid}" for jid in snap.blocked)
        self.emit(snap.time, "Sim State")
        for text in (cpu, io, f"Ready Q: {{ {ready} }}", f"IO    Q: {{ {blocked} }}"):
            self.lines.append(text)
            self.log_lines.append(text)
            self._write(text, self._targets())
