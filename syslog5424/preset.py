# coding: utf-8

"""syslog5424.preset is a submodule to provide some settings
for frequently used parser configurations."""


from ._common import SyslogParser, ParserDefinitionError


def default():
    """Generate :class:`~syslog5424.SyslogParser` of default settings.

    The default parser does not check the maximum lengths of header tokens,
    and keeps a leading BOM in the message body.
    :func:`~syslog5424.init_parser` generates same instance without any arguments.

    Returns:
        :class:`~syslog5424.SyslogParser`
    """
    return SyslogParser()


def strict():
    """Generate :class:`~syslog5424.SyslogParser` that enforces the maximum
    lengths of RFC 5424 section 6:

    * HOSTNAME: 255
    * APP-NAME: 48
    * PROCID: 128
    * MSGID: 32
    * SD-ID and PARAM-NAME: 32

    Returns:
        :class:`~syslog5424.SyslogParser`
    """
    return SyslogParser(enforce_length=True)


PRESETS = {"default": default,
           "strict": strict}


def get_preset(name, **kwargs):
    """Generate a preset parser by its name.

    Args:
        name (str): One of :data:`PRESETS` keys.
        **kwargs: Options overriding the preset.

    Returns:
        :class:`~syslog5424.SyslogParser`
    """
    try:
        parser = PRESETS[name]()
    except KeyError:
        msg = "unknown preset {0!r}, one of [{1}]".format(name, ", ".join(PRESETS))
        raise ParserDefinitionError(msg) from None
    if kwargs:
        options = {"enforce_length": parser.enforce_length,
                   "strip_bom": parser.strip_bom}
        options.update(kwargs)
        parser = SyslogParser(**options)
    return parser
