# coding: utf-8

import logging

logger = logging.getLogger(__name__)

NILVALUE = "-"
BOM = "\ufeff"

# keys in public (field names of SyslogMessage and its document form)
KEY_SEVERITY = "severity"
KEY_FACILITY = "facility"
KEY_VERSION = "version"
KEY_TIMESTAMP = "timestamp"
KEY_TIMESTAMP_NANOS = "timestamp_nanos"
KEY_HOSTNAME = "hostname"
KEY_APPNAME = "appname"
KEY_PROCID = "procid"
KEY_MSGID = "msgid"
KEY_SD = "sd"
KEY_MESSAGE = "msg"


class ParserDefinitionError(Exception):
    """ParserDefinitionError is raised when the given parser options
    are inappropriate (e.g., a broken configuration file).
    """
    pass


class BadDocument(ValueError):
    """BadDocument is raised when a generic document (dict or JSON text)
    cannot be decoded into a :class:`~message.SyslogMessage`.
    """
    pass


class ParseError(Exception):
    """Base class of all errors raised while decoding a syslog message.

    If you want to pass such broken messages,
    use try-except with this exception.

    Args:
        msg (str): Description of the violation.
        pos (int, optional): Offset in the input where the violation was found.
    """

    def __init__(self, msg, pos=None):
        super().__init__(msg)
        self.msg = msg
        self.pos = pos

    def __str__(self):
        if self.pos is None:
            return self.msg
        return "{0} (at position {1})".format(self.msg, self.pos)


class BadPriority(ParseError):
    """PRI part is malformed (e.g., missing brackets or non-digits)."""
    pass


class BadFacilityInPri(BadPriority):
    """Facility (or the PRI value it is decoded from) is out of range."""
    pass


class BadSeverityInPri(BadPriority):
    """Severity (or the PRI value it is decoded from) is out of range."""
    pass


class BadVersion(ParseError):
    pass


class BadTimestamp(ParseError):
    """Malformed date, time, fraction or UTC offset."""
    pass


class BadField(ParseError):
    """A header token (HOSTNAME, APP-NAME, PROCID, MSGID) is malformed."""
    pass


class FieldTooLong(BadField):
    pass


class BadStructuredData(ParseError):
    """Unterminated element, illegal escape or malformed parameter."""
    pass


class UnexpectedEndOfInput(ParseError):
    pass


class BadEncoding(ParseError):
    pass


class SyslogParser:
    """RFC 5424 syslog message parser.

    The parser walks the message from left to right exactly once.
    Each header field is decoded by one :class:`~header.Item`,
    followed by the structured data part and the free-form message body.
    The first violation raises a :class:`ParseError` subclass;
    a partially decoded message is never returned.

    A parser only holds read-only options and compiled patterns,
    so one instance can be shared by any number of threads.

    Example:
        >>> mes = "<14>1 2017-07-26T14:47:35.869952+05:30 my_hostname app 5678 ID47 - hello"
        >>> parser = syslog5424.init_parser()
        >>> m = parser.process_line(mes)
        >>> m.facility, m.severity
        (<Facility.USER: 1>, <Severity.INFO: 6>)
        >>> m.timestamp, m.timestamp_nanos
        (1501060655, 869952000)
        >>> m.procid
        Pid(5678)

    Args:
        enforce_length (bool, optional): Reject header tokens and SD-NAMEs
            longer than the RFC 5424 limits with :class:`FieldTooLong`
            (or :class:`BadStructuredData`). Defaults to False, in which case
            over-long tokens are decoded as is.
        strip_bom (bool, optional): Remove a leading byte order mark
            from the message body. Defaults to False (the BOM is kept and
            reported by :attr:`~message.SyslogMessage.has_bom`).
    """

    def __init__(self, enforce_length=False, strip_bom=False):
        from . import header
        self.enforce_length = enforce_length
        self.strip_bom = strip_bom
        self.header_items = header.default_items(enforce_length)

    def __repr__(self):
        return "SyslogParser(enforce_length={0}, strip_bom={1})".format(
            self.enforce_length, self.strip_bom)

    def process_header(self, line, verbose=False):
        """Decode the header fields of a message (PRI to MSGID).

        Args:
            line (str): A syslog message.
            verbose (bool, optional): Log each decoded field.

        Returns:
            tuple: Decoded fields (dict) and the offset of
            the structured data part.
        """
        d_items = {}
        pos = 0
        for item in self.header_items:
            values, pos = item.consume(line, pos)
            if verbose:
                for key, val in values.items():
                    logger.info("%s: %r", key, val)
            d_items.update(values)
        return d_items, pos

    def process_structured_data(self, line, pos, verbose=False):
        """Decode the structured data part and the message body.

        Returns:
            tuple: :class:`~structured_data.StructuredData` and message body.
        """
        from .structured_data import parse_structured_data
        if self.enforce_length:
            from .header import SD_NAME_MAX_LENGTH
            max_length = SD_NAME_MAX_LENGTH
        else:
            max_length = None
        sd, pos = parse_structured_data(line, pos, max_length)
        if verbose:
            logger.info("%s: %r", KEY_SD, sd)

        if pos == len(line):
            mes = ""
        elif line[pos] == " ":
            mes = line[pos + 1:]
        else:
            msg = "expected space after structured data, got {0!r}".format(line[pos])
            raise BadStructuredData(msg, pos)
        if self.strip_bom and mes.startswith(BOM):
            mes = mes[len(BOM):]
        return sd, mes

    def process_line(self, line, verbose=False):
        """Parse a syslog message.

        Framing delimiters (e.g., a trailing line feed) are not removed;
        the input is expected to be exactly one message.

        Args:
            line (str or bytes): A syslog message.
                Bytes are decoded as UTF-8.
            verbose (bool, optional): Log each decoded field.

        Returns:
            :class:`~message.SyslogMessage`
        """
        from .message import SyslogMessage
        if isinstance(line, (bytes, bytearray)):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise BadEncoding("message is not valid UTF-8", e.start) from e

        try:
            if line == "":
                raise UnexpectedEndOfInput("empty message", 0)
            d_items, pos = self.process_header(line, verbose)
            sd, mes = self.process_structured_data(line, pos, verbose)
        except ParseError as e:
            logger.debug("parse failed: %s: %s", e.__class__.__name__, e)
            raise

        d_items[KEY_SD] = sd
        d_items[KEY_MESSAGE] = mes
        return SyslogMessage(**d_items)


def init_parser(**kwargs):
    """Generate :class:`SyslogParser` object.

    If no arguments are given,
    this function generates SyslogParser with default configurations
    (see :func:`preset.default`).

    Args:
        **kwargs: Options passed to :class:`SyslogParser`.
    """
    if not kwargs:
        from . import preset
        return preset.default()
    return SyslogParser(**kwargs)


_default_parser = None


def parse_message(line):
    """Parse one syslog message with the default parser.

    Args:
        line (str or bytes): A syslog message.

    Returns:
        :class:`~message.SyslogMessage`
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = init_parser()
    return _default_parser.process_line(line)
