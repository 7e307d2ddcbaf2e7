# coding: utf-8

"""In-memory representation of a single syslog message."""

import datetime
import json
import re
from collections import namedtuple

from . import _common
from .priority import Severity, Facility, encode_pri
from .structured_data import StructuredData

PID_MIN = -2 ** 31
PID_MAX = 2 ** 31 - 1

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
# range of seconds representable as datetime.datetime in UTC
TIMESTAMP_MIN = (datetime.datetime.min.replace(tzinfo=datetime.timezone.utc) -
                 _EPOCH) // datetime.timedelta(seconds=1)
TIMESTAMP_MAX = (datetime.datetime.max.replace(tzinfo=datetime.timezone.utc) -
                 _EPOCH) // datetime.timedelta(seconds=1)
_RE_PID = re.compile(r'[+-]?[0-9]+')


class ProcId:
    """PROCID of a syslog message.

    PROCIDs are usually numeric process ids (:class:`Pid`),
    but some systems use something else (:class:`Name`).

    Two ProcIds are equal only if both the variant and the value are equal.
    Ordering is defined between ProcIds of the same variant;
    comparing a Pid with a Name raises TypeError
    (use :meth:`compare` to test it without exceptions).
    """
    __slots__ = ("_value",)

    def __init__(self, value):
        self._value = value

    @property
    def value(self):
        return self._value

    @staticmethod
    def from_token(token):
        """Classify a PROCID token.

        A token of decimal digits (with an optional sign) that fits in
        a signed 32-bit integer is a :class:`Pid`; anything else is a :class:`Name`.
        """
        if _RE_PID.fullmatch(token):
            value = int(token)
            if PID_MIN <= value <= PID_MAX:
                return Pid(value)
        return Name(token)

    @staticmethod
    def from_document(obj):
        """Rebuild a ProcId from its document form (int or str)."""
        if isinstance(obj, bool):
            raise TypeError("procid must be int or str, not bool")
        if isinstance(obj, int):
            return Pid(obj)
        if isinstance(obj, str):
            return Name(obj)
        raise TypeError("procid must be int or str, not {0}".format(
            type(obj).__name__))

    def to_document(self):
        return self._value

    @staticmethod
    def compare(a, b):
        """Three-way comparison restricted to one variant.

        Returns:
            int or None: -1, 0 or 1, or None if a and b are incomparable
            (different variants).
        """
        if type(a) is not type(b):
            return None
        if a.value < b.value:
            return -1
        elif a.value > b.value:
            return 1
        return 0

    def _comparable(self, other):
        return isinstance(other, ProcId) and type(self) is type(other)

    def __eq__(self, other):
        if not isinstance(other, ProcId):
            return NotImplemented
        return type(self) is type(other) and self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __lt__(self, other):
        if not self._comparable(other):
            return NotImplemented
        return self._value < other._value

    def __le__(self, other):
        if not self._comparable(other):
            return NotImplemented
        return self._value <= other._value

    def __gt__(self, other):
        if not self._comparable(other):
            return NotImplemented
        return self._value > other._value

    def __ge__(self, other):
        if not self._comparable(other):
            return NotImplemented
        return self._value >= other._value

    def __repr__(self):
        return "{0}({1!r})".format(type(self).__name__, self._value)

    def __str__(self):
        return str(self._value)


class Pid(ProcId):
    """Numeric process id (signed 32-bit integer)."""
    __slots__ = ()

    def __init__(self, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("pid must be int, not {0}".format(type(value).__name__))
        if not PID_MIN <= value <= PID_MAX:
            raise ValueError("pid {0} out of 32-bit range".format(value))
        super().__init__(value)


class Name(ProcId):
    """Textual process identifier."""
    __slots__ = ()

    def __init__(self, value):
        if not isinstance(value, str):
            raise TypeError("name must be str, not {0}".format(type(value).__name__))
        if value == "":
            raise ValueError("name must not be empty")
        super().__init__(value)


_FIELDS = (_common.KEY_SEVERITY, _common.KEY_FACILITY, _common.KEY_VERSION,
           _common.KEY_TIMESTAMP, _common.KEY_TIMESTAMP_NANOS,
           _common.KEY_HOSTNAME, _common.KEY_APPNAME, _common.KEY_PROCID,
           _common.KEY_MSGID, _common.KEY_SD, _common.KEY_MESSAGE)


class SyslogMessage(namedtuple("_SyslogMessage", _FIELDS)):
    """A RFC 5424 syslog message.

    Usually generated by :meth:`~syslog5424.SyslogParser.process_line`.
    Optional fields (NILVALUE in the wire format) are None.

    Attributes:
        severity (:class:`~priority.Severity`)
        facility (:class:`~priority.Facility`)
        version (int): Protocol version, usually 1.
        timestamp (int or None): Seconds since the UTC epoch.
        timestamp_nanos (int or None): Fraction of the second in nanoseconds.
        hostname (str or None)
        appname (str or None)
        procid (:class:`ProcId` or None)
        msgid (str or None)
        sd (:class:`~structured_data.StructuredData`): Empty if NILVALUE.
        msg (str): Message body. A leading BOM is kept as is.
    """
    __slots__ = ()

    def __new__(cls, severity, facility, version=1, timestamp=None,
                timestamp_nanos=None, hostname=None, appname=None,
                procid=None, msgid=None, sd=None, msg=""):
        severity = Severity.from_int(int(severity))
        facility = Facility.from_int(int(facility))
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            raise ValueError("version must be a positive integer: {0!r}".format(version))
        if timestamp is not None and not TIMESTAMP_MIN <= timestamp <= TIMESTAMP_MAX:
            raise ValueError("timestamp out of range: {0}".format(timestamp))
        if timestamp_nanos is not None and not 0 <= timestamp_nanos <= 999999999:
            raise ValueError("timestamp_nanos out of range: {0}".format(timestamp_nanos))
        if procid is not None and not isinstance(procid, ProcId):
            raise TypeError("procid must be ProcId or None")
        if not isinstance(msg, str):
            raise TypeError("msg must be str, not {0}".format(type(msg).__name__))
        if sd is None:
            sd = StructuredData()
        elif not isinstance(sd, StructuredData):
            sd = StructuredData(sd)
        return super().__new__(cls, severity, facility, version, timestamp,
                               timestamp_nanos, hostname, appname,
                               procid, msgid, sd, msg)

    def _replace(self, **kwargs):
        """Return a new message replacing the given fields.

        Unlike the plain namedtuple method, the new values are validated.
        """
        fields = self._asdict()
        fields.update(kwargs)
        return type(self)(**fields)

    @property
    def priority(self):
        """int: PRI value (facility * 8 + severity)."""
        return encode_pri(self.facility, self.severity)

    @property
    def datetime(self):
        """datetime.datetime: Timestamp in UTC (microsecond precision),
        or None if the timestamp is NILVALUE."""
        if self.timestamp is None:
            return None
        micro = (self.timestamp_nanos or 0) // 1000
        return _EPOCH + datetime.timedelta(seconds=self.timestamp,
                                           microseconds=micro)

    @property
    def has_bom(self):
        """bool: The body starts with a BOM (explicitly UTF-8 encoded)."""
        return self.msg.startswith(_common.BOM)

    @property
    def body(self):
        """str: Message body without the leading BOM."""
        if self.has_bom:
            return self.msg[len(_common.BOM):]
        return self.msg

    def to_dict(self):
        """Encode into a generic document.

        Severity and facility are encoded as their lowercase names,
        procid as int (Pid) or str (Name), and absent values as None.
        """
        procid = None if self.procid is None else self.procid.to_document()
        return {
            _common.KEY_SEVERITY: self.severity.as_str(),
            _common.KEY_FACILITY: self.facility.as_str(),
            _common.KEY_VERSION: self.version,
            _common.KEY_TIMESTAMP: self.timestamp,
            _common.KEY_TIMESTAMP_NANOS: self.timestamp_nanos,
            _common.KEY_HOSTNAME: self.hostname,
            _common.KEY_APPNAME: self.appname,
            _common.KEY_PROCID: procid,
            _common.KEY_MSGID: self.msgid,
            _common.KEY_SD: self.sd.to_dict(),
            _common.KEY_MESSAGE: self.msg,
        }

    @classmethod
    def from_dict(cls, d):
        """Decode a generic document generated by :meth:`to_dict`.

        Raises:
            BadDocument: if a key is missing or a value has a wrong type.
        """
        missing = [key for key in _FIELDS if key not in d]
        if missing:
            raise _common.BadDocument("missing keys: {0}".format(", ".join(missing)))
        try:
            kwargs = {key: d[key] for key in _FIELDS}
            kwargs[_common.KEY_SEVERITY] = Severity.from_name(d[_common.KEY_SEVERITY])
            kwargs[_common.KEY_FACILITY] = Facility.from_name(d[_common.KEY_FACILITY])
            for key in (_common.KEY_TIMESTAMP, _common.KEY_TIMESTAMP_NANOS):
                if kwargs[key] is not None and (isinstance(kwargs[key], bool) or
                                                not isinstance(kwargs[key], int)):
                    raise TypeError("{0} must be int or None".format(key))
            if not isinstance(kwargs[_common.KEY_MESSAGE], str):
                raise TypeError("msg must be str")
            for key in (_common.KEY_HOSTNAME, _common.KEY_APPNAME, _common.KEY_MSGID):
                if kwargs[key] is not None and not isinstance(kwargs[key], str):
                    raise TypeError("{0} must be str or None".format(key))
            if d[_common.KEY_PROCID] is not None:
                kwargs[_common.KEY_PROCID] = ProcId.from_document(d[_common.KEY_PROCID])
            kwargs[_common.KEY_SD] = StructuredData.from_dict(d[_common.KEY_SD])
            return cls(**kwargs)
        except (_common.ParseError, ValueError, TypeError, AttributeError) as e:
            raise _common.BadDocument(str(e)) from e

    def to_json(self, **kwargs):
        """Encode into JSON text. Keyword arguments go to json.dumps."""
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text):
        try:
            d = json.loads(text)
        except ValueError as e:
            raise _common.BadDocument("invalid JSON: {0}".format(e)) from e
        if not isinstance(d, dict):
            raise _common.BadDocument("JSON document must be an object")
        return cls.from_dict(d)

    def format_timestamp(self):
        """Render the timestamp in RFC 5424 format (always in UTC).

        Fractions are rendered up to microseconds; sub-microsecond
        digits of :attr:`timestamp_nanos` are dropped.
        """
        dt = self.datetime
        if dt is None:
            return _common.NILVALUE
        buf = "{0:04d}-{1:02d}-{2:02d}T{3:02d}:{4:02d}:{5:02d}".format(
            dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)
        if self.timestamp_nanos is not None:
            fraction = "{0:09d}".format(self.timestamp_nanos)[:6].rstrip("0")
            buf += "." + (fraction or "0")
        return buf + "Z"

    def format(self):
        """Render in the RFC 5424 wire format.

        Parsing the result yields an equal message, except that
        sub-microsecond precision of the timestamp is lost
        (see :meth:`format_timestamp`).
        """

        def _nil(value):
            return _common.NILVALUE if value is None else str(value)

        header = "<{0}>{1} {2} {3} {4} {5} {6} {7}".format(
            self.priority, self.version, self.format_timestamp(),
            _nil(self.hostname), _nil(self.appname), _nil(self.procid),
            _nil(self.msgid), self.sd.format())
        if self.msg:
            return header + " " + self.msg
        return header
