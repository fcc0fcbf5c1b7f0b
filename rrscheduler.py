"""
rrscheduler.py


Discrete-event simulation of a single-CPU, single-IO-device computer
scheduled with fixed-quantum Round Robin.


Reads a workload file (one job per line: arrival time, CPU burst count,
then the alternating CPU/IO bursts), runs the simulation tick by tick and
prints the trace followed by the per-job statistics and CPU utilization.
The trace and report can also be written to an output file, and a log
file receives the trace plus diagnostics (idle ticks, fatal errors).


Usage:
python rrscheduler.py workload.txt 4 -o out.txt -l sim.log
"""


import argparse
import sys
from contextlib import ExitStack

from core.errors import ConfigError, InvariantViolation
from core.system import System
from simio.parser import parse_quantum, parse_workload
from simio.report import format_report
from simio.trace import Trace


def _open_for_writing(stack: ExitStack, path: str, what: str):
    try:
        return stack.enter_context(open(path, 'w'))
    except OSError as exc:
        raise ConfigError(f"Unable To Open {what} File {path}: {exc}") from exc


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='rrscheduler (Round Robin CPU/IO scheduler simulator)')
    parser.add_argument('workload', help='Path to workload file')
    parser.add_argument('quantum', help='CPU time quantum in ticks (positive integer)')
    parser.add_argument('-o', '--output', help='Also write trace and report to this file')
    parser.add_argument('-l', '--log', help='Write trace and diagnostics to this log file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Echo the log, including event queue activity, to stderr')
    args = parser.parse_args(argv)

    with ExitStack() as stack:
        try:
            quantum = parse_quantum(args.quantum)
            jobs, rejected = parse_workload(args.workload)
            out = _open_for_writing(stack, args.output, 'Output') if args.output else None
            log = _open_for_writing(stack, args.log, 'Log') if args.log else None
        except ConfigError as exc:
            print(exc, file=sys.stderr)
            return 1

        streams = [sys.stdout] + ([out] if out else [])
        log_streams = ([log] if log else []) + ([sys.stderr] if args.verbose else [])
        trace = Trace(streams=streams, log_streams=log_streams)

        for line, reason in rejected:
            trace.emit(0, f"Error Parsing Line... Ignoring, '{line}' ({reason})")

        system = System(jobs, quantum, trace=trace, verbose=args.verbose)
        try:
            measurements = system.run()
        except InvariantViolation as exc:
            trace.fatal(system.current_time, str(exc))
            print(f"fatal: {exc}", file=sys.stderr)
            return 1

        for text in format_report(jobs, measurements):
            for stream in streams:
                print(text, file=stream)
    return 0


if __name__ == '__main__':
    sys.exit(main())
