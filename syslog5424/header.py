# coding: utf-8

"""Items to decode the header part of RFC 5424 messages.

A header consists of PRI, VERSION, TIMESTAMP, HOSTNAME, APP-NAME,
PROCID and MSGID. Each field is decoded by one :class:`Item`,
which matches its pattern at the current offset of the message
and moves the offset to the next field.
"""

import datetime
import re
from abc import ABC, abstractmethod

from . import _common
from .message import ProcId
from .priority import decode_pri

_KEY_TIMESTAMP = _common.KEY_TIMESTAMP
_KEY_TIMESTAMP_NANOS = _common.KEY_TIMESTAMP_NANOS

# keys for internal processing
_KEY_PRI = "pri"
_KEY_YEAR = "year"
_KEY_MONTH = "month"
_KEY_DAY = "day"
_KEY_HOUR = "hour"
_KEY_MINUTE = "minute"
_KEY_SECOND = "second"
_KEY_DSECOND = "dsecond"
_KEY_TZ = "tz"

# RFC 5424 section 6
HOSTNAME_MAX_LENGTH = 255
APPNAME_MAX_LENGTH = 48
PROCID_MAX_LENGTH = 128
MSGID_MAX_LENGTH = 32
SD_NAME_MAX_LENGTH = 32

FRACTION_MAX_DIGITS = 6

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


class Item(ABC):
    """Base class of items, components of header parts.

    Args:
        trailing_space (bool, optional): The field is followed by
            exactly one space (true for all fields except PRI).
    """
    _field_name = "variable"
    error = _common.BadField

    def __init__(self, trailing_space=True):
        self._trailing_space = trailing_space
        self._reobj = re.compile(self.get_regex())

    @property
    @abstractmethod
    def pattern(self):
        """str: Get regular expression pattern string for this *Item class*."""
        raise NotImplementedError

    @property
    def field_name(self):
        """str: Name of the field, used in error messages."""
        return self._field_name

    def get_regex(self):
        return self.pattern

    def test(self, string):
        """Test this Item will match the whole input string or not.

        Args:
            string: Input string to test matching.

        Returns:
            re.Match or None
        """
        return self._reobj.fullmatch(string)

    def consume(self, line, pos):
        """Decode this field at the given offset.

        Args:
            line (str): A whole syslog message.
            pos (int): Offset of this field.

        Returns:
            tuple: Decoded values (dict of field name and value)
            and the offset of the next field.
        """
        if pos >= len(line):
            msg = "{0} is missing".format(self.field_name)
            raise _common.UnexpectedEndOfInput(msg, pos)
        mo = self._reobj.match(line, pos)
        if mo is None:
            msg = "invalid {0}".format(self.field_name)
            raise self.error(msg, pos)
        values = self.pick(mo)

        pos = mo.end()
        if self._trailing_space:
            if pos >= len(line):
                msg = "message ends after {0}".format(self.field_name)
                raise _common.UnexpectedEndOfInput(msg, pos)
            if line[pos] != " ":
                msg = "expected space after {0}, got {1!r}".format(
                    self.field_name, line[pos])
                raise self.error(msg, pos)
            pos += 1
        return values, pos

    @abstractmethod
    def pick(self, mo):
        """Get field names and the extracted values from
        `re <https://docs.python.org/3/library/re.html>`_ MatchObject.

        Returns:
            dict
        """
        raise NotImplementedError


class Priority(Item):
    """Item for PRI, a bracketed value of facility * 8 + severity.

    | e.g., :samp:`<165>` for local4.notice
    """
    _field_name = "PRI"
    error = _common.BadPriority

    def __init__(self):
        super().__init__(trailing_space=False)

    @property
    def pattern(self):
        return r'<(?P<pri>[0-9]{1,3})>'

    def pick(self, mo):
        try:
            facility, severity = decode_pri(int(mo.group(_KEY_PRI)))
        except _common.BadPriority as e:
            raise e.__class__(e.msg, mo.start(_KEY_PRI)) from None
        return {_common.KEY_FACILITY: facility,
                _common.KEY_SEVERITY: severity}


class Version(Item):
    """Item for VERSION, a positive integer (1 for RFC 5424)."""
    _field_name = "VERSION"
    error = _common.BadVersion

    @property
    def pattern(self):
        return r'[0-9]+'

    def pick(self, mo):
        version = int(mo.group(0))
        if version < 1:
            raise self.error("version must be positive", mo.start())
        return {_common.KEY_VERSION: version}


class Timestamp(Item):
    """Item for TIMESTAMP in RFC 3339 format, or NILVALUE.

    The timestamp is converted into seconds since the UTC epoch,
    and the fraction of seconds (up to 6 digits) into nanoseconds.

    | e.g., :samp:`1985-04-12T23:20:50.52Z`

    | e.g., :samp:`2003-08-24T05:14:15.000003-07:00`
    """
    _field_name = "TIMESTAMP"
    error = _common.BadTimestamp

    @property
    def pattern(self):
        return (r'-|'  # NILVALUE
                r'(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})T'  # year-month-dayT
                r'(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})'  # hour:minute:second
                r'(\.(?P<dsecond>[0-9]+))?'  # decimal part of seconds
                r'(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})')  # timezone

    def pick(self, mo):
        if mo.group(0) == _common.NILVALUE:
            return {_KEY_TIMESTAMP: None, _KEY_TIMESTAMP_NANOS: None}

        nanos = None
        if mo.group(_KEY_DSECOND) is not None:
            nanos = self.parse_fraction(mo.group(_KEY_DSECOND), mo.start(_KEY_DSECOND))
        tz = self.parse_tz(mo.group(_KEY_TZ), mo.start(_KEY_TZ))
        try:
            dt = datetime.datetime(year=int(mo.group(_KEY_YEAR)),
                                   month=int(mo.group(_KEY_MONTH)),
                                   day=int(mo.group(_KEY_DAY)),
                                   hour=int(mo.group(_KEY_HOUR)),
                                   minute=int(mo.group(_KEY_MINUTE)),
                                   second=int(mo.group(_KEY_SECOND)),
                                   tzinfo=tz)
        except ValueError as e:
            raise self.error("invalid date-time: {0}".format(e), mo.start()) from None
        try:
            dt.astimezone(datetime.timezone.utc)
        except OverflowError:
            msg = "date-time out of range in UTC: {0}".format(mo.group(0))
            raise self.error(msg, mo.start()) from None
        seconds = (dt - _EPOCH) // datetime.timedelta(seconds=1)
        return {_KEY_TIMESTAMP: seconds, _KEY_TIMESTAMP_NANOS: nanos}

    @classmethod
    def parse_fraction(cls, string, pos=None):
        """Scale a decimal fraction of seconds into nanoseconds."""
        size = len(string)
        if size > FRACTION_MAX_DIGITS:
            msg = "fraction of seconds has {0} digits (at most {1})".format(
                size, FRACTION_MAX_DIGITS)
            raise cls.error(msg, pos)
        return int(string) * 10 ** (9 - size)

    @classmethod
    def parse_tz(cls, string, pos=None):
        """Convert ``Z`` or ``[+-]hh:mm`` into datetime.timezone."""
        if string == "Z":
            return datetime.timezone.utc

        hours = int(string[1:3])
        minutes = int(string[4:6])
        if hours > 23 or minutes > 59:
            raise cls.error("invalid UTC offset {0}".format(string), pos)
        gmtoff = hours * 60 * 60 + minutes * 60
        if string.startswith("-"):
            gmtoff = -gmtoff
        return datetime.timezone(datetime.timedelta(seconds=gmtoff))


class Token(Item):
    """Item for a header token without white spaces, or NILVALUE.

    Args:
        name (string): Field name used as the key of the decoded value.
        max_length (int, optional): Maximum length of the token.
            Not checked if None.
    """
    error = _common.BadField

    def __init__(self, name, max_length=None):
        self._name = name
        self._max_length = max_length
        super().__init__()

    @property
    def pattern(self):
        return r'\S+'

    @property
    def field_name(self):
        return self._name.upper()

    def pick(self, mo):
        token = mo.group(0)
        if self._max_length is not None and len(token) > self._max_length:
            msg = "{0} longer than {1} characters".format(
                self.field_name, self._max_length)
            raise _common.FieldTooLong(msg, mo.start())
        if token == _common.NILVALUE:
            return {self._name: None}
        return {self._name: self.pick_value(token)}

    def pick_value(self, token):
        return token


class ProcIdToken(Token):
    """Token item for PROCID, classified into Pid or Name."""

    def __init__(self, max_length=None):
        super().__init__(_common.KEY_PROCID, max_length=max_length)

    def pick_value(self, token):
        return ProcId.from_token(token)


def default_items(enforce_length=False):
    """Generate the list of :class:`Item` for a RFC 5424 header.

    Args:
        enforce_length (bool, optional): Check maximum lengths of tokens.

    Returns:
        list of :class:`Item`
    """

    def _limit(length):
        return length if enforce_length else None

    return [Priority(),
            Version(),
            Timestamp(),
            Token(_common.KEY_HOSTNAME, _limit(HOSTNAME_MAX_LENGTH)),
            Token(_common.KEY_APPNAME, _limit(APPNAME_MAX_LENGTH)),
            ProcIdToken(_limit(PROCID_MAX_LENGTH)),
            Token(_common.KEY_MSGID, _limit(MSGID_MAX_LENGTH))]
