#!/usr/bin/env python
# coding: utf-8

import configparser

from . import preset
from ._common import ParserDefinitionError

_SECTION_GENERAL = "general"
_SECTION_PARSER = "parser"
_BOOLEAN_OPTIONS = ("enforce_length", "strip_bom")


def load_from_config(fp):
    """Load a syslog5424 parser from configparser text file.

    The file selects a preset in [general] section,
    and overrides its options in [parser] section.
    Both sections are optional.

    Example::

        [general]
        preset = strict

        [parser]
        strip_bom = true

    Args:
        fp (str): file path of configparser text file.

    Returns:
        :class:`~syslog5424.SyslogParser`
    """
    conf = configparser.ConfigParser()
    try:
        with open(fp) as f:
            conf.read_file(f)
    except configparser.Error as e:
        raise ParserDefinitionError("broken config file {0}: {1}".format(fp, e)) from e
    return load_from_configparser(conf)


def load_from_configparser(conf):
    """Same as :func:`load_from_config`, but for a loaded ConfigParser."""
    name = conf.get(_SECTION_GENERAL, "preset", fallback="default")

    kwargs = {}
    if conf.has_section(_SECTION_PARSER):
        for option in conf.options(_SECTION_PARSER):
            if option not in _BOOLEAN_OPTIONS:
                msg = "unknown option {0} in [{1}]".format(option, _SECTION_PARSER)
                raise ParserDefinitionError(msg)
            try:
                kwargs[option] = conf.getboolean(_SECTION_PARSER, option)
            except ValueError as e:
                raise ParserDefinitionError(str(e)) from e

    return preset.get_preset(name, **kwargs)
