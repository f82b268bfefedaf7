"""Tests for the top2csv command line."""

import io

from top2csv.cli import build_parser, main
from top2csv.models import Metric

LOG = """\
top - 10:00:00 up 1 day,  3:12,  2 users,  load average: 0.10, 0.20, 0.30
    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
    123 root      20   0    100m   5120   1024 S   1.0   0.1   0:01.00 alpha
    124 root      20   0   51200   5120   1024 S   2.5   0.1   0:01.00 beta
top - 10:00:05 up 1 day,  3:12,  2 users,  load average: 0.10, 0.20, 0.30
    123 root      20   0    110m   5120   1024 S   0.5   0.1   0:01.00 alpha
"""


class TestParser:
    """Tests for argument parsing."""

    def test_mem_flag(self):
        args = build_parser().parse_args(["--mem", "alpha"])
        assert args.metric is Metric.VIRTUAL_MEMORY
        assert args.processes == ["alpha"]

    def test_cpu_short_flag(self):
        args = build_parser().parse_args(["-c", "alpha", "beta"])
        assert args.metric is Metric.CPU_PERCENT
        assert args.processes == ["alpha", "beta"]

    def test_preset_left_to_watch_list_building(self):
        """Test preset names are not validated by argparse."""
        args = build_parser().parse_args(["--mem", "-p", "nope"])
        assert args.preset == "nope"

    def test_help_lists_presets(self):
        help_text = build_parser().format_help()
        for name in ("all", "ats", "cms", "dcs", "ecs", "sms"):
            assert name in help_text


class TestMain:
    """Tests for main()."""

    def test_stdin_to_stdout(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(LOG))

        assert main(["--mem", "alpha", "beta"]) == 0

        assert capsys.readouterr().out == (
            "Hour,Minute,Second,alpha,beta\n"
            "10,0,0,102400,51200\n"
            "10,0,5,112640,0\n"
        )

    def test_files(self, tmp_path, capsys):
        log = tmp_path / "top.log"
        log.write_text(LOG)
        output = tmp_path / "out.csv"

        assert main(["--cpu", "-i", str(log), "-o", str(output), "beta", "alpha"]) == 0

        assert output.read_text() == (
            "Hour,Minute,Second,beta,alpha\n10,0,0,2.5,1.0\n10,0,5,0.0,0.5\n"
        )
        assert capsys.readouterr().out == ""

    def test_input_file_to_stdout(self, tmp_path, capsys):
        log = tmp_path / "top.log"
        log.write_text(LOG)

        assert main(["--cpu", "--input-file", str(log), "alpha"]) == 0
        assert capsys.readouterr().out.splitlines()[1] == "10,0,0,1.0"

    def test_stdin_to_output_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(LOG))
        output = tmp_path / "out.csv"

        assert main(["--mem", "-o", str(output), "beta"]) == 0
        assert output.read_text().splitlines()[1:] == ["10,0,0,51200", "10,0,5,0"]

    def test_duplicate_processes_collapsed(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(LOG))

        assert main(["--mem", "alpha", "alpha"]) == 0
        assert capsys.readouterr().out.splitlines()[0] == "Hour,Minute,Second,alpha"

    def test_metric_required(self, capsys):
        """Test a missing --cpu/--mem exits with 1."""
        assert main(["alpha"]) == 1
        assert "one of the arguments -c/--cpu -m/--mem is required" in capsys.readouterr().err

    def test_cpu_and_mem_exclusive(self, capsys):
        """Test --cpu together with --mem exits with 1."""
        assert main(["--mem", "--cpu", "alpha"]) == 1
        assert "not allowed with argument" in capsys.readouterr().err

    def test_unknown_preset(self, capsys):
        """Test an unknown preset is reported as an error with status 1."""
        assert main(["--mem", "-p", "nope", "alpha"]) == 1
        assert capsys.readouterr().err == "Error: unknown preset 'nope'\n"

    def test_help_exits_zero(self, capsys):
        assert main(["--help"]) == 0
        assert "usage: top2csv" in capsys.readouterr().out

    def test_no_process(self, capsys):
        assert main(["--mem"]) == 1
        assert "at least one process must be specified" in capsys.readouterr().err

    def test_malformed_log(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("not a header\n" + LOG))

        assert main(["--mem", "alpha"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: log must start with a snapshot header")

    def test_malformed_log_to_file_leaves_no_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("not a header\n"))
        output = tmp_path / "out.csv"

        assert main(["--mem", "-o", str(output), "alpha"]) == 1
        assert not output.exists()

    def test_strict_aborts_on_bad_number(self, monkeypatch, capsys):
        bad = LOG.replace("100m", "lots")
        monkeypatch.setattr("sys.stdin", io.StringIO(bad))

        assert main(["--mem", "--strict", "alpha"]) == 1
        assert "invalid metric value 'lots'" in capsys.readouterr().err

    def test_bad_number_skipped_by_default(self, monkeypatch, capsys):
        bad = LOG.replace("100m", "lots")
        monkeypatch.setattr("sys.stdin", io.StringIO(bad))

        assert main(["--mem", "alpha"]) == 0
        captured = capsys.readouterr()
        assert captured.out.splitlines()[1] == "10,0,0,0"
        assert "[WARNING] Skipping line 3" in captured.err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main(["--mem", "-i", str(tmp_path / "missing.log"), "alpha"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_preset(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(LOG))

        assert main(["--mem", "-p", "ecs", "alpha"]) == 0
        header = capsys.readouterr().out.splitlines()[0].split(",")
        assert header[3] == "ascmanager"
        assert header[-1] == "alpha"

    def test_log_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(LOG.replace("100m", "lots")))
        log_file = tmp_path / "logs" / "top2csv.log"

        assert main(["--mem", "--log-file", str(log_file), "alpha"]) == 0
        assert "Skipping line 3" in log_file.read_text()


class TestFind:
    """Tests for --find."""

    def test_converts_each_log(self, tmp_path, capsys):
        (tmp_path / "node1").mkdir()
        (tmp_path / "node1" / "top.log").write_text(LOG)
        (tmp_path / "node1" / "top.log.1").write_text(LOG)
        (tmp_path / "ignored.log").write_text(LOG)

        assert main(["--mem", "--find", str(tmp_path), "alpha"]) == 0

        assert (tmp_path / "node1" / "top.log-mem.csv").read_text() == (
            "Hour,Minute,Second,alpha\n10,0,0,102400\n10,0,5,112640\n"
        )
        assert (tmp_path / "node1" / "top.log.1-mem.csv").exists()
        assert not (tmp_path / "ignored.log-mem.csv").exists()
        out = capsys.readouterr().out
        assert f"Found: {tmp_path / 'node1' / 'top.log'}" in out
        assert f"Writing: {tmp_path / 'node1' / 'top.log-mem.csv'}" in out

    def test_ignores_input_and_output(self, tmp_path):
        (tmp_path / "top.log").write_text(LOG)
        output = tmp_path / "out.csv"

        assert main(["--cpu", "-f", str(tmp_path), "-o", str(output), "alpha"]) == 0
        assert not output.exists()
        assert (tmp_path / "top.log-cpu.csv").exists()

    def test_malformed_log_skipped(self, tmp_path, capsys):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "top.log").write_text("junk\n")
        (tmp_path / "b" / "top.log").write_text(LOG)

        assert main(["--mem", "-f", str(tmp_path), "alpha"]) == 0

        assert not (tmp_path / "a" / "top.log-mem.csv").exists()
        assert (tmp_path / "b" / "top.log-mem.csv").exists()
        assert "Skipping" in capsys.readouterr().err

    def test_missing_directory(self, tmp_path, capsys):
        assert main(["--mem", "-f", str(tmp_path / "missing"), "alpha"]) == 1
        assert "Error accessing path" in capsys.readouterr().err
