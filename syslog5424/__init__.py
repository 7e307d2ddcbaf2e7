# coding: utf-8

"""syslog5424 decodes RFC 5424 syslog messages into typed objects."""

__version__ = '0.1.0'

from ._common import ParserDefinitionError, BadDocument
from ._common import ParseError, BadPriority, BadFacilityInPri, BadSeverityInPri
from ._common import BadVersion, BadTimestamp, BadField, FieldTooLong
from ._common import BadStructuredData, UnexpectedEndOfInput, BadEncoding
from ._common import SyslogParser, init_parser, parse_message
from .priority import Severity, Facility, InvalidInteger
from .message import ProcId, Pid, Name, SyslogMessage
from .structured_data import StructuredData
from .load import load_from_config
