import json
import os
import tempfile
import unittest

from click.testing import CliRunner

from syslog5424.__main__ import main

MESSAGES = (
    "<14>1 2017-07-26T14:47:35.869952+05:30 my_hostname custom_appname "
    "5678 some_unique_msgid - Some other message\n"
    "<165>1 2003-10-11T22:14:15.003Z mymachine.example.com evntslog - ID47 "
    '[exampleSDID@32473 iut="3"] An application event\n'
)


class TestCLI(unittest.TestCase):

    def test_json(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-t", "json"], input=MESSAGES)
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 2
        d = json.loads(lines[0])
        assert d["procid"] == 5678
        assert d["timestamp"] == 1501060655
        d = json.loads(lines[1])
        assert d["facility"] == "local4"
        assert d["sd"] == {"exampleSDID@32473": {"iut": "3"}}

    def test_object(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input=MESSAGES)
        assert result.exit_code == 0, result.output
        assert "SyslogMessage(" in result.output
        assert "Pid(5678)" in result.output

    def test_wire(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-t", "wire", "-i"], input=MESSAGES)
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 4
        assert lines[1].startswith("<14>1 2017-07-26T09:17:35.869952Z my_hostname")

    def test_stdin_encoding(self):
        line = "<14>1 - h\u00f4st app - - - caf\u00e9\n"
        runner = CliRunner()
        result = runner.invoke(main, ["-t", "json", "--encoding", "latin-1"],
                               input=line.encode("latin-1"))
        assert result.exit_code == 0, result.output
        d = json.loads(result.output)
        assert d["hostname"] == "h\u00f4st"
        assert d["msg"] == "caf\u00e9"

    def test_error(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input="<14>1 - - - - - -\nbroken\n")
        assert result.exit_code != 0
        assert "line 2" in result.output

    def test_ignore_errors(self):
        fd, path = tempfile.mkstemp(suffix=".json")
        os.close(fd)
        self.addCleanup(os.remove, path)

        runner = CliRunner()
        result = runner.invoke(main, ["--ignore-errors", "-t", "json", "-o", path],
                               input="broken\n" + MESSAGES)
        assert result.exit_code == 0, result.output
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["appname"] == "evntslog"

    def test_files(self):
        fd, path = tempfile.mkstemp(suffix=".log")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(MESSAGES.replace("\n", "\r\n"))
        self.addCleanup(os.remove, path)

        runner = CliRunner()
        result = runner.invoke(main, ["--strict", "-t", "json", path])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert json.loads(lines[0])["msg"] == "Some other message"
