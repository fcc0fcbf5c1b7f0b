from dataclasses import dataclass
from typing import Optional, Tuple

from core.device import IODevice
from core.errors import ConfigError, InvariantViolation
from core.event import Event, EventQueue, EventType
from core.job import Job, JobState, JobTable
from core.scheduler import Scheduler
from simio.trace import Trace


SNAPSHOT_INTERVAL = 5


@dataclass(frozen=True)
class Snapshot:
    time: int
    cpu: Optional[int]
    cpu_burst: Optional[int]
    io: Optional[int]
    io_burst: Optional[int]
    ready: Tuple[int, ...]
    blocked: Tuple[int, ...]


@dataclass(frozen=True)
class Measurements:
    total_time: int
    idle_time: int

    @property
    def cpu_utilization(self) -> float:
        if self.total_time <= 0:
            return 0.0
        return (self.total_time - self.idle_time) / self.total_time * 100


class System:
    def __init__(self, jobs: JobTable, time_quantum: int, trace: Optional[Trace] = None, verbose: bool = False):
        if time_quantum <= 0:
            raise ConfigError(f"time quantum must be positive, got {time_quantum}")
        self.jobs = jobs
        self.time_quantum = time_quantum
        self.trace = trace if trace is not None else Trace()
        self.verbose = verbose

        # DES structures
        self.current_time = 0
        self.event_queue = EventQueue()
        self.scheduler = Scheduler(time_quantum=time_quantum)
        self.io_device = IODevice()
        self.started = False

        # stats; idle ticks only count once the first job has arrived
        self.start_time = min((j.arrival_time for j in jobs), default=0)
        self.cpu_idle_time = 0

        self._handlers = {
            EventType.TERMINATE: self._handle_terminate,
            EventType.ARRIVE: self._handle_arrival,
            EventType.IO_RECEIVE: self._handle_io_receive,
            EventType.IO_REQUEST: self._handle_io_request,
            EventType.PREEMPT: self._handle_preempt,
        }

    # event queue helpers
    def push_event(self, time: int, etype: EventType, jid: int) -> Event:
        ev = self.event_queue.push(time, etype, jid)
        if self.verbose:
            self.trace.log(self.current_time, f"enqueue {etype.name} pid={jid} due={time}")
        return ev

    # start
    def start(self):
        if self.started:
            return
        self.started = True
        self.trace.emit(self.current_time, f"Sim Started With Time Quantum of {self.time_quantum}")
        for job in self.jobs:
            self.push_event(job.arrival_time, EventType.ARRIVE, job.jid)

    # main DES loop
    def run(self) -> Measurements:
        self.start()
        while self.step():
            pass
        return self.measurements()

    def step(self) -> bool:
        """Advance to the next due tick and resolve it. Returns False once nothing is left to do."""
        if not self.started:
            self.start()
        if not self.event_queue:
            return False

        due = self.event_queue.next_time()
        if due < self.current_time:
            raise InvariantViolation(f"event due at {due} is behind the clock")
        while self.current_time < due:
            self.trace.log(self.current_time, "No Event")
            self._advance_clock()

        while self.event_queue and self.event_queue.next_time() == self.current_time:
            ev = self.event_queue.pop()
            if self.verbose:
                self.trace.log(self.current_time, f"handle {ev.type.name} pid={ev.jid}")
            self._handlers[ev.type](ev)

        if self.scheduler.is_idle():
            self._dispatch()
        if self.io_device.is_idle():
            self._io_dispatch()

        if not self.event_queue:
            # the final transition leaves no job anywhere; this tick is not measured
            return False
        self._advance_clock()
        return True

    # accounting
    def _tally(self):
        for jid in self.scheduler.ready_queue:
            self.jobs.get(jid).wait_time += 1
        for jid in self.io_device.queue:
            self.jobs.get(jid).io_time += 1
        if self.io_device.active is not None:
            self.jobs.get(self.io_device.active).io_time += 1
        if self.scheduler.is_idle() and self.current_time >= self.start_time:
            self.cpu_idle_time += 1

    def _advance_clock(self):
        self._tally()
        self.current_time += 1
        if self.current_time % SNAPSHOT_INTERVAL == 0:
            self.trace.snapshot(self.snapshot())

    def measurements(self) -> Measurements:
        total = max(0, self.current_time - self.start_time) if len(self.jobs) else 0
        return Measurements(total_time=total, idle_time=self.cpu_idle_time)

    # transitions
    def _require_cpu_job(self, ev: Event, action: str) -> Job:
        if self.scheduler.is_idle():
            raise InvariantViolation(f"CPU cannot be idle while {action}")
        if self.scheduler.running != ev.jid:
            raise InvariantViolation(f"{action} event for P{ev.jid} but P{self.scheduler.running} is on the CPU")
        job = self.jobs.get(ev.jid)
        if job.state is not JobState.RUNNING:
            raise InvariantViolation(f"CPU active job must be running to {action}")
        return job

    def _handle_arrival(self, ev: Event):
        job = self.jobs.get(ev.jid)
        if job.state is not JobState.NEW:
            raise InvariantViolation(f"P{job.jid} must be new to arrive, is {job.state.name}")
        self.trace.emit(self.current_time, f"P{job.jid} Arrives - Enters Ready Queue")
        job.state = JobState.READY
        self.scheduler.enqueue_ready(job.jid)

    def _handle_preempt(self, ev: Event):
        job = self._require_cpu_job(ev, "preempt")
        if job.front_burst() <= self.time_quantum:
            raise InvariantViolation(f"P{job.jid} burst {job.front_burst()} fits in the quantum")
        self.trace.emit(self.current_time, f"P{job.jid} Preempted - Moved to Ready Queue")
        job.state = JobState.READY
        job.bursts[0] -= self.time_quantum
        self.scheduler.enqueue_ready(job.jid)
        self.scheduler.release()

    def _handle_terminate(self, ev: Event):
        job = self._require_cpu_job(ev, "terminate")
        if not job.is_last_burst():
            raise InvariantViolation(f"P{job.jid} cannot terminate with {len(job.bursts)} bursts left")
        self.trace.emit(self.current_time, f"P{job.jid} Terminated")
        job.state = JobState.TERMINATED
        job.bursts.popleft()
        job.turnaround_time = self.current_time - job.arrival_time
        self.scheduler.release()

    def _handle_io_request(self, ev: Event):
        job = self._require_cpu_job(ev, "perform io request")
        if job.is_last_burst():
            raise InvariantViolation(f"P{job.jid} has no IO burst to request")
        self.trace.emit(self.current_time, f"P{job.jid} IO Blocked")
        job.state = JobState.BLOCKED
        job.bursts.popleft()
        self.io_device.enqueue(job.jid)
        self.scheduler.release()

    def _handle_io_receive(self, ev: Event):
        if self.io_device.is_idle():
            raise InvariantViolation("IO cannot be idle while receiving io")
        if self.io_device.active != ev.jid:
            raise InvariantViolation(f"io receive for P{ev.jid} but P{self.io_device.active} is on the device")
        job = self.jobs.get(ev.jid)
        if job.state is not JobState.BLOCKED:
            raise InvariantViolation("IO active job must be blocked to receive io")
        self.trace.emit(self.current_time, f"P{job.jid} IO Done")
        job.state = JobState.READY
        job.bursts.popleft()
        self.scheduler.enqueue_ready(job.jid)
        self.io_device.release()

    # dispatchers
    def _dispatch(self):
        if not self.scheduler.is_idle():
            raise InvariantViolation(f"CPU already holds P{self.scheduler.running}")
        jid = self.scheduler.pick_next()
        if jid is None:
            return
        job = self.jobs.get(jid)
        if job.state is not JobState.READY:
            raise InvariantViolation(f"P{jid} dispatched from the ready queue while {job.state.name}")
        burst = job.front_burst()
        if burst <= 0:
            raise InvariantViolation(f"P{jid} has a non-positive burst {burst}")
        job.state = JobState.RUNNING
        self.scheduler.running = jid
        self.trace.emit(self.current_time, f"P{jid} Dispatched To CPU, Burst = {burst}")
        etype, delay = self.scheduler.plan_burst(job)
        self.push_event(self.current_time + delay, etype, jid)

    def _io_dispatch(self):
        if not self.io_device.is_idle():
            raise InvariantViolation(f"IO device already holds P{self.io_device.active}")
        jid = self.io_device.pop_oldest()
        if jid is None:
            return
        job = self.jobs.get(jid)
        if job.state is not JobState.BLOCKED:
            raise InvariantViolation(f"P{jid} dispatched to IO while {job.state.name}")
        burst = job.front_burst()
        if burst <= 0:
            raise InvariantViolation(f"P{jid} has a non-positive io burst {burst}")
        self.io_device.active = jid
        self.trace.emit(self.current_time, f"P{jid} Dispatched To IO, Burst = {burst}")
        self.push_event(self.current_time + burst, EventType.IO_RECEIVE, jid)

    # inspection
    def snapshot(self) -> Snapshot:
        """Device occupants with their current front burst, and both queues."""
        def front(jid):
            return None if jid is None else self.jobs.get(jid).front_burst()
        return Snapshot(
            time=self.current_time,
            cpu=self.scheduler.running,
            cpu_burst=front(self.scheduler.running),
            io=self.io_device.active,
            io_burst=front(self.io_device.active),
            ready=tuple(self.scheduler.ready_queue),
            blocked=tuple(self.io_device.queue),
        )

    def check_invariants(self):
        """Raise InvariantViolation unless every live job sits in exactly one place."""
        places = list(self.scheduler.ready_queue) + list(self.io_device.queue)
        places += [jid for jid in (self.scheduler.running, self.io_device.active) if jid is not None]
        if len(places) != len(set(places)):
            raise InvariantViolation(f"job held in more than one place: {places}")
        live = {j.jid for j in self.jobs if j.state not in (JobState.NEW, JobState.TERMINATED)}
        if set(places) != live:
            raise InvariantViolation(f"placed jobs {sorted(places)} differ from live jobs {sorted(live)}")
        expected = [(self.scheduler.ready_queue, JobState.READY), (self.io_device.queue, JobState.BLOCKED)]
        if self.scheduler.running is not None:
            expected.append(([self.scheduler.running], JobState.RUNNING))
        if self.io_device.active is not None:
            expected.append(([self.io_device.active], JobState.BLOCKED))
        for jids, state in expected:
            for jid in jids:
                job = self.jobs.get(jid)
                if job.state is not state or not job.bursts:
                    raise InvariantViolation(f"P{jid} is {job.state.name} with {len(job.bursts)} bursts, expected {state.name}")
