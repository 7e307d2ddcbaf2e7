#!/usr/bin/env python

import logging
import sys

import click

logger = logging.getLogger("syslog5424")


def text_postprocess(line):
    return line.rstrip("\r\n")


def bin_postprocess(line, encoding="utf-8"):
    return line.decode(encoding).rstrip("\r\n")


def iter_lines(files, encoding="utf-8"):
    if len(files) == 0:
        for line in click.get_text_stream("stdin", encoding=encoding):
            yield text_postprocess(line)
    else:
        for fp in files:
            if ".tar." in fp:
                import tarfile
                with tarfile.open(fp, 'r') as tar:
                    for info in tar.getmembers():
                        if info.isfile():
                            with tar.extractfile(info) as f:
                                for line in f:
                                    yield bin_postprocess(line, encoding=encoding)
            elif fp.endswith(".bz2"):
                import bz2
                with bz2.open(fp, 'rt', encoding=encoding) as f:
                    for line in f:
                        yield text_postprocess(line)
            elif fp.endswith(".gz"):
                import gzip
                with gzip.open(fp, 'r') as f:
                    for line in f:
                        yield bin_postprocess(line, encoding=encoding)
            else:
                with open(fp, 'rt', encoding=encoding, newline="") as f:
                    for line in f:
                        yield text_postprocess(line)


def format_message(message, format_type):
    if format_type == "object":
        return repr(message)
    elif format_type == "json":
        return message.to_json(ensure_ascii=False)
    elif format_type == "wire":
        return message.format()


@click.command()
@click.argument("files", nargs=-1)
@click.option("--config", "-c", default=None,
              help="filename of parser configuration")
@click.option("--strict", is_flag=True,
              help="use strict preset (ignored if --config is given)")
@click.option("--encoding", default="utf-8",
              help="encoding to load input data (files and stdin)")
@click.option("--output", "-o", default=None,
              help="output filename")
@click.option("--type", "-t", "format_type", default="object",
              type=click.Choice(["object", "json", "wire"]),
              help="output format type")
@click.option("--show-input", "-i", "show_input", is_flag=True,
              help="additionally show the input string line as is")
@click.option("--ignore-errors", "ignore_errors", is_flag=True,
              help="skip messages that cannot be parsed")
@click.option("--verbose", "-v", is_flag=True,
              help="verbose output to stderr")
def main(files, config, strict, encoding, output, format_type, show_input,
         ignore_errors, verbose):
    """Parse RFC 5424 syslog messages given in FILES (or stdin if FILES not given),
    one message per line."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    from syslog5424 import preset
    from syslog5424.load import load_from_config
    from syslog5424._common import ParseError, ParserDefinitionError
    try:
        if config:
            lp = load_from_config(config)
        elif strict:
            lp = preset.strict()
        else:
            lp = preset.default()
    except ParserDefinitionError as e:
        raise click.BadParameter(str(e), param_hint="--config")
    logger.debug("using %r", lp)

    if output:
        f_output = open(output, "w", encoding="utf-8")
    else:
        f_output = sys.stdout

    try:
        for lineno, line in enumerate(iter_lines(files, encoding=encoding), 1):
            if line == "":
                continue
            if show_input:
                f_output.write(line + "\n")
            try:
                message = lp.process_line(line, verbose=verbose)
            except ParseError as e:
                if not ignore_errors:
                    raise click.ClickException("line {0}: {1}".format(lineno, e))
                logger.warning("line %d skipped: %s", lineno, e)
                continue
            f_output.write(format_message(message, format_type) + "\n")
    finally:
        if output:
            f_output.close()


if __name__ == "__main__":
    main()
