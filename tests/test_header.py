import unittest

from syslog5424 import header
from syslog5424 import (BadPriority, BadFacilityInPri, BadVersion, BadTimestamp,
                        BadField, FieldTooLong, UnexpectedEndOfInput, Pid, Name)


class TestHeader(unittest.TestCase):

    def test_items(self):
        # priority
        item = header.Priority()
        assert item.test("<0>")
        assert item.test("<191>")
        assert not item.test("<1910>")
        assert not item.test("<a>")
        assert not item.test("14>")

        # timestamp
        item = header.Timestamp()
        assert item.test("-")
        assert item.test("2112-09-03T03:00:00Z")
        assert item.test("2112-09-03T03:00:00+09:00")
        assert item.test("2112-09-03T03:00:00.000000Z")
        assert item.test("2112-09-03T03:00:00.0-03:30")
        assert not item.test("2112-09-03T03:00:00")
        assert not item.test("2112-09-03 03:00:00Z")
        assert not item.test("2112-09-03t03:00:00z")

        # token
        item = header.Token("hostname")
        assert item.test("host-name.example.org")
        assert item.test("2001:db8::1")
        assert not item.test("host name")

    def test_priority(self):
        item = header.Priority()
        values, pos = item.consume("<165>1 ...", 0)
        assert values == {"facility": 20, "severity": 5}
        assert pos == 5

        for line in ["14>1", "<14 1", "<>1", "<x>1", "<1234>1", "<14"]:
            with self.assertRaises(BadPriority, msg=line):
                item.consume(line, 0)
        with self.assertRaises(BadFacilityInPri):
            item.consume("<192>1", 0)

    def test_version(self):
        item = header.Version()
        values, pos = item.consume("<1>12 -", 3)
        assert values == {"version": 12}
        assert pos == 6

        for line in ["<1>0 -", "<1>x -", "<1>1x -", "<1>1\t-"]:
            with self.assertRaises(BadVersion, msg=line):
                item.consume(line, 3)
        with self.assertRaises(UnexpectedEndOfInput):
            item.consume("<1>1", 3)
        with self.assertRaises(UnexpectedEndOfInput):
            item.consume("<1>", 3)

    def test_timestamp(self):
        item = header.Timestamp()
        values, _ = item.consume("1985-04-12T23:20:50.52Z host", 0)
        assert values == {"timestamp": 482196050, "timestamp_nanos": 520000000}

        values, _ = item.consume("1985-04-12T19:20:50.52-04:00 host", 0)
        assert values == {"timestamp": 482196050, "timestamp_nanos": 520000000}

        values, _ = item.consume("2003-10-11T22:14:15.003Z host", 0)
        assert values == {"timestamp": 1065910455, "timestamp_nanos": 3000000}

        values, _ = item.consume("2003-08-24T05:14:15.000003-07:00 host", 0)
        assert values["timestamp_nanos"] == 3000

        values, _ = item.consume("1970-01-01T00:00:00Z host", 0)
        assert values == {"timestamp": 0, "timestamp_nanos": None}

        values, _ = item.consume("1969-12-31T23:59:59Z host", 0)
        assert values["timestamp"] == -1

        values, pos = item.consume("- host", 0)
        assert values == {"timestamp": None, "timestamp_nanos": None}
        assert pos == 2

    def test_bad_timestamp(self):
        item = header.Timestamp()
        broken = [
            "2003-13-11T22:14:15Z",  # month
            "2003-02-30T22:14:15Z",  # day
            "2003-10-11T24:14:15Z",  # hour
            "2003-10-11T22:60:15Z",  # minute
            "2003-10-11T22:14:60Z",  # second
            "0000-10-11T22:14:15Z",  # year
            "2003-10-11T22:14:15.1234567Z",  # too many fraction digits
            "2003-10-11T22:14:15.Z",  # empty fraction
            "2003-10-11T22:14:15+24:00",  # offset hour
            "2003-10-11T22:14:15+05:60",  # offset minute
            "2003-10-11T22:14:15+0500",
            "2003-10-11T22:14:15",  # no offset
            "2003-10-11T22:14:15 Europe/Berlin",
            "Oct 11 22:14:15",
            "-x",
            "0001-01-01T00:00:00+01:00",  # before year 1 in UTC
            "9999-12-31T23:59:59-00:01",  # after year 9999 in UTC
        ]
        for ts in broken:
            with self.assertRaises(BadTimestamp, msg=ts):
                item.consume(ts + " host", 0)

    def test_token(self):
        item = header.Token("hostname")
        values, pos = item.consume("mymachine.example.com evntslog", 0)
        assert values == {"hostname": "mymachine.example.com"}
        assert pos == len("mymachine.example.com ")

        values, _ = item.consume("- evntslog", 0)
        assert values == {"hostname": None}

        values, _ = item.consume("-- evntslog", 0)
        assert values == {"hostname": "--"}

        with self.assertRaises(BadField):
            item.consume(" evntslog", 0)
        with self.assertRaises(UnexpectedEndOfInput):
            item.consume("mymachine", 0)

    def test_token_length(self):
        item = header.Token("msgid", max_length=header.MSGID_MAX_LENGTH)
        values, _ = item.consume("x" * 32 + " -", 0)
        assert values == {"msgid": "x" * 32}
        with self.assertRaises(FieldTooLong):
            item.consume("x" * 33 + " -", 0)

        item = header.Token("msgid")
        values, _ = item.consume("x" * 33 + " -", 0)
        assert values == {"msgid": "x" * 33}

    def test_procid(self):
        item = header.ProcIdToken()
        values, _ = item.consume("5678 ID47", 0)
        assert values == {"procid": Pid(5678)}
        values, _ = item.consume("worker-1 ID47", 0)
        assert values == {"procid": Name("worker-1")}
        values, _ = item.consume("- ID47", 0)
        assert values == {"procid": None}

    def test_default_items(self):
        items = header.default_items()
        names = [item.field_name for item in items]
        assert names == ["PRI", "VERSION", "TIMESTAMP", "HOSTNAME",
                         "APPNAME", "PROCID", "MSGID"]
