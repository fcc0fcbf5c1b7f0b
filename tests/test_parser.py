import pytest

from core.errors import ConfigError, WorkloadError
from simio.parser import parse_job_line, parse_quantum, parse_workload, parse_workload_lines


def test_parse_job_line():
    assert parse_job_line("3 2 4 5 6") == (3, [4, 5, 6])
    assert parse_job_line("  1\t1   7 ") == (1, [7])


@pytest.mark.parametrize('line', [
    "0 1 4",        # arrival before tick 1
    "1 0",          # no cpu bursts
    "1 2 3 4",      # burst count mismatch
    "1 1 3 4",      # too many bursts
    "1 1 0",        # zero burst
    "a 1 2",
    "1 1 2.5",
    "1",
    "1 1 1_0",      # python-only literal
    "+1 1 4",
    "1 1 ٣",        # non-ascii digit
])
def test_parse_job_line_rejects(line):
    with pytest.raises(WorkloadError):
        parse_job_line(line)


def test_ids_follow_successful_parses():
    jobs, rejected = parse_workload_lines(["1 1 2\n", "bad\n", "\n", "# note\n", "4 2 1 1 1\n"])
    assert len(jobs) == 2
    assert [j.jid for j in jobs] == [0, 1]
    assert jobs.get(1).arrival_time == 4
    assert list(jobs.get(1).bursts) == [1, 1, 1]
    assert jobs.get(1).cpu_time == 2
    assert [line for line, _ in rejected] == ["bad"]


def test_parse_workload_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        parse_workload(str(tmp_path / 'nope.txt'))
    with pytest.raises(ConfigError):
        parse_workload(str(tmp_path))


def test_parse_workload_file(tmp_path):
    path = tmp_path / 'w.txt'
    path.write_text("1 1 4\n2 2 1 1 1\n")
    jobs, rejected = parse_workload(str(path))
    assert len(jobs) == 2
    assert rejected == []


@pytest.mark.parametrize('text,expected', [('4', 4), (' 10 ', 10)])
def test_parse_quantum(text, expected):
    assert parse_quantum(text) == expected


@pytest.mark.parametrize('text', ['0', '-1', 'x', '2.5', '', '1_0', '+3', '٣'])
def test_parse_quantum_rejects(text):
    with pytest.raises(ConfigError):
        parse_quantum(text)


def test_undecodable_line_is_skipped(tmp_path):
    path = tmp_path / 'w.txt'
    path.write_bytes(b"1 1 4\n\xff\xfe 1 2\n2 1 1\n")
    jobs, rejected = parse_workload(str(path))
    assert len(jobs) == 2
    assert [j.arrival_time for j in jobs] == [1, 2]
    assert len(rejected) == 1
    assert rejected[0][1] == "invalid encoding"


def test_crlf_lines(tmp_path):
    path = tmp_path / 'w.txt'
    path.write_bytes(b"1 1 4\r\n2 1 1\r\n")
    jobs, rejected = parse_workload(str(path))
    assert len(jobs) == 2
    assert rejected == []
