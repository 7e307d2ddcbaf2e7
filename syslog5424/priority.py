# coding: utf-8

"""Severity and facility codes, and the PRI value combining them."""

from enum import IntEnum

from . import _common

PRI_MAX = 191


class InvalidInteger(ValueError):
    """The integer does not correspond to a known severity or facility."""
    pass


class _Code(IntEnum):

    @classmethod
    def from_int(cls, value):
        """Convert an integer (as used in the wire format) into a member.

        Raises:
            InvalidInteger: if the value is not a known code.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInteger("{0} is not an integer".format(value))
        try:
            return cls(value)
        except ValueError:
            msg = "{0} does not correspond to a known {1}".format(
                value, cls.__name__.lower())
            raise InvalidInteger(msg) from None

    @classmethod
    def from_name(cls, name):
        """Convert a canonical lowercase name into a member.

        Raises:
            BadSeverityInPri or BadFacilityInPri: if the name is unknown.
        """
        if isinstance(name, str) and name.islower():
            member = cls.__members__.get(name.upper())
            if member is not None:
                return member
        msg = "unknown {0} name {1!r}".format(cls.__name__.lower(), name)
        raise _NAME_ERRORS[cls](msg)

    def as_str(self):
        """str: Canonical lowercase name, e.g. ``info`` or ``local0``."""
        return self.name.lower()

    def __str__(self):
        return self.as_str()


class Severity(_Code):
    """Syslog severities (RFC 5424 section 6.2.1)."""
    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class Facility(_Code):
    """Syslog facilities. Numbers follow RFC 5424, names follow Linux."""
    KERN = 0
    USER = 1
    MAIL = 2
    DAEMON = 3
    AUTH = 4
    SYSLOG = 5
    LPR = 6
    NEWS = 7
    UUCP = 8
    CRON = 9
    AUTHPRIV = 10
    FTP = 11
    NTP = 12
    AUDIT = 13
    ALERT = 14
    CLOCKD = 15
    LOCAL0 = 16
    LOCAL1 = 17
    LOCAL2 = 18
    LOCAL3 = 19
    LOCAL4 = 20
    LOCAL5 = 21
    LOCAL6 = 22
    LOCAL7 = 23


_NAME_ERRORS = {Severity: _common.BadSeverityInPri,
                Facility: _common.BadFacilityInPri}


def decode_pri(value):
    """Split a PRI value into facility and severity.

    Args:
        value (int): PRI value, 0 to 191.

    Returns:
        tuple: :class:`Facility` and :class:`Severity`.
    """
    if not 0 <= value <= PRI_MAX:
        msg = "priority {0} out of range 0-{1}".format(value, PRI_MAX)
        raise _common.BadFacilityInPri(msg)
    return Facility.from_int(value // 8), Severity.from_int(value % 8)


def encode_pri(facility, severity):
    """Combine facility and severity into a PRI value."""
    return int(facility) * 8 + int(severity)
