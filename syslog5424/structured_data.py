# coding: utf-8

"""STRUCTURED-DATA part of RFC 5424 messages.

The container :class:`StructuredData` maps an SD-ID to its parameters.
The wire grammar does not forbid repeated SD-IDs or parameter names;
they are merged here, and a repeated parameter overwrites the former value.
"""

import re
from collections.abc import Mapping

from . import _common

_ESCAPABLE = '"\\]'

# SD-NAME: printable characters except '=', SP, ']' and '"'
_RE_SD_NAME = re.compile(r'[^=\s\]"]+')
# parameter value up to the closing (unescaped) quote
_RE_PARAM_VALUE = re.compile(r'((?:[^"\\]|\\.)*)"', re.DOTALL)
_RE_ESCAPE = re.compile(r'\\(.?)', re.DOTALL)


def escape_param_value(value):
    """Escape ``"``, ``\\`` and ``]`` in a PARAM-VALUE."""
    return re.sub(r'(["\\\]])', r'\\\1', value)


def unescape_param_value(value, pos=None):
    """Resolve escape sequences in a raw PARAM-VALUE.

    Only ``\\"``, ``\\\\`` and ``\\]`` are allowed.

    Args:
        value (str): PARAM-VALUE without enclosing quotes.
        pos (int, optional): Offset of the value in the whole message,
            used for error reports.

    Raises:
        BadStructuredData: if the value includes other escape sequences.
    """

    def _replace(mo):
        c = mo.group(1)
        if c == "" or c not in _ESCAPABLE:
            err_pos = None if pos is None else pos + mo.start()
            msg = "illegal escape sequence {0!r}".format(mo.group(0))
            raise _common.BadStructuredData(msg, err_pos)
        return c

    return _RE_ESCAPE.sub(_replace, value)


class StructuredData(Mapping):
    """Structured data of a syslog message.

    It behaves as a read-only mapping from SD-ID to a dict of
    parameter names and values. Use :meth:`entry` or :meth:`insert_tuple`
    to build one programmatically.

    Example:
        >>> sd = StructuredData()
        >>> sd.insert_tuple("exampleSDID@32473", "iut", "3")
        >>> sd.find_tuple("exampleSDID@32473", "iut")
        '3'
        >>> sd.format()
        '[exampleSDID@32473 iut="3"]'

    Args:
        elements (dict, optional): Initial elements,
            SD-ID to a dict of parameters.
    """

    def __init__(self, elements=None):
        self._elements = {}
        if elements is not None:
            for sd_id, params in elements.items():
                entry = self.entry(sd_id)
                for param_id, value in params.items():
                    entry[param_id] = value

    def __getitem__(self, sd_id):
        return self._elements[sd_id]

    def __iter__(self):
        return iter(self._elements)

    def __len__(self):
        """The number of distinct SD-IDs."""
        return len(self._elements)

    def __repr__(self):
        return "StructuredData({0!r})".format(self._elements)

    def entry(self, sd_id):
        """Fetch the parameters of an SD-ID, inserting an empty one if absent.

        Returns:
            dict: Mutable mapping of parameter names to values.
        """
        return self._elements.setdefault(sd_id, {})

    def insert_tuple(self, sd_id, param_id, value):
        """Insert (or overwrite) one parameter of an SD-ID."""
        self.entry(sd_id)[param_id] = value

    def find_tuple(self, sd_id, param_id):
        """Lookup a parameter value. Returns None if absent."""
        params = self._elements.get(sd_id)
        if params is None:
            return None
        return params.get(param_id)

    def find_sdid(self, sd_id):
        """Lookup all parameters of an SD-ID. Returns None if absent."""
        return self._elements.get(sd_id)

    def is_empty(self):
        return len(self._elements) == 0

    def to_dict(self):
        return {sd_id: dict(params) for sd_id, params in self._elements.items()}

    @classmethod
    def from_dict(cls, d):
        """Build from a dict of dicts as given by :meth:`to_dict`.

        Raises:
            TypeError: if an SD-ID, a parameter name or a value is not str.
        """
        if not isinstance(d, Mapping):
            raise TypeError("structured data must be a dict")
        for sd_id, params in d.items():
            if not isinstance(sd_id, str) or not isinstance(params, Mapping):
                raise TypeError("invalid element {0!r}".format(sd_id))
            for param_id, value in params.items():
                if not isinstance(param_id, str) or not isinstance(value, str):
                    msg = "invalid parameter {0!r} in element {1!r}".format(
                        param_id, sd_id)
                    raise TypeError(msg)
        return cls(d)

    def format(self):
        """Render in the wire format (NILVALUE if empty)."""
        if self.is_empty():
            return _common.NILVALUE
        buf = []
        for sd_id, params in self._elements.items():
            buf.append("[" + sd_id)
            for param_id, value in params.items():
                buf.append(' {0}="{1}"'.format(param_id, escape_param_value(value)))
            buf.append("]")
        return "".join(buf)


def _read_name(line, pos, max_length, what):
    mo = _RE_SD_NAME.match(line, pos)
    if mo is None:
        if pos >= len(line):
            msg = "unterminated structured data element"
        else:
            msg = "empty {0}".format(what)
        raise _common.BadStructuredData(msg, pos)
    name = mo.group(0)
    if max_length is not None and len(name) > max_length:
        msg = "{0} {1!r} longer than {2} characters".format(what, name, max_length)
        raise _common.BadStructuredData(msg, pos)
    return name, mo.end()


def _parse_element(line, pos, sd, max_length):
    # pos points next to the opening bracket
    sd_id, pos = _read_name(line, pos, max_length, "SD-ID")
    sd.entry(sd_id)
    while True:
        if pos >= len(line):
            msg = "unterminated structured data element [{0}".format(sd_id)
            raise _common.BadStructuredData(msg, pos)
        c = line[pos]
        if c == "]":
            return pos + 1
        elif c != " ":
            msg = "unexpected character {0!r} in element [{1}".format(c, sd_id)
            raise _common.BadStructuredData(msg, pos)

        param_id, pos = _read_name(line, pos + 1, max_length, "PARAM-NAME")
        if not line.startswith('="', pos):
            msg = "expected '=\"' after parameter {0}".format(param_id)
            raise _common.BadStructuredData(msg, pos)
        pos += 2
        mo = _RE_PARAM_VALUE.match(line, pos)
        if mo is None:
            msg = "unterminated value of parameter {0}".format(param_id)
            raise _common.BadStructuredData(msg, pos)
        sd.insert_tuple(sd_id, param_id, unescape_param_value(mo.group(1), pos))
        pos = mo.end()


def parse_structured_data(line, pos, max_length=None):
    """Decode the STRUCTURED-DATA part starting at the given offset.

    Args:
        line (str): A whole syslog message.
        pos (int): Offset of the structured data part.
        max_length (int, optional): Maximum length of SD-IDs and
            parameter names. Not checked if None.

    Returns:
        tuple: :class:`StructuredData` and the offset next to it.
    """
    sd = StructuredData()
    if pos >= len(line):
        raise _common.UnexpectedEndOfInput("structured data is missing", pos)
    if line[pos] == _common.NILVALUE:
        return sd, pos + 1
    if line[pos] != "[":
        msg = "expected '[' or NILVALUE, got {0!r}".format(line[pos])
        raise _common.BadStructuredData(msg, pos)

    while pos < len(line) and line[pos] == "[":
        pos = _parse_element(line, pos + 1, sd, max_length)
    return sd, pos
