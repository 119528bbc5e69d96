"""
Command line entry point.

Usage:
  md2pdf README.md > README.pdf
  md2pdf -p a4r -l ja -c monochrome -t "Manual" doc.md > doc.pdf
  cat doc.md | md2pdf -n -r 50 > doc.pdf
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from md2pdf import __version__
from md2pdf.config import COLOR_CODES, LANGUAGE_CODES, PAPER_CODES
from md2pdf.converter import Options, convert
from md2pdf.errors import Md2PdfError
from md2pdf.logger import configure, get_logger
from md2pdf.streams import read_input, write_output

LOGGER = get_logger("md2pdf")

EXIT_OK, EXIT_FAILURE = 0, 1


class UsageError(Md2PdfError):
    pass


class _Parser(argparse.ArgumentParser):
    # every failure, usage errors included, exits with 1
    def error(self, message: str):
        raise UsageError(message)


def _ratio(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("must be an integer") from None


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="md2pdf", description="Typeset Markdown to PDF for publishing")
    p.add_argument("infile",          nargs="*", help="input file ('-' or omitted: standard input)")
    p.add_argument("-p", "--paper",   default="a4", choices=PAPER_CODES, help="paper spec")
    p.add_argument("-t", "--title",   help="title")
    p.add_argument("-n", "--nopage",  action="store_true", help="disable page numbers")
    p.add_argument("-r", "--ratio",   default=100, type=_ratio, help="image ratio in percent")
    p.add_argument("-l", "--lang",    default="latin", choices=LANGUAGE_CODES, help="language spec")
    p.add_argument("-i", "--noindent", action="store_true", help="disable paragraph indentation")
    p.add_argument("-c", "--color",   default="color", choices=COLOR_CODES, help="color spec")
    p.add_argument("-a", "--anchors", action="store_true", help="show anchor ids and texts of headings")
    p.add_argument("-b", "--base",    help=argparse.SUPPRESS)
    p.add_argument("-v", "--version", action="version", version=__version__, help="show version")
    return p


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if len(args.infile) > 1:
        raise UsageError("too many input files")
    base = args.base or os.getcwd()
    infile = None if not args.infile or args.infile[0] == "-" else Path(base, args.infile[0])

    markdown_text = read_input(infile)
    if not markdown_text:
        LOGGER.debug("empty input, nothing to do")
        return EXIT_OK

    options = Options(
        paper=args.paper,
        lang=args.lang,
        color=args.color,
        title=args.title,
        nopage=args.nopage,
        ratio=args.ratio,
        noindent=args.noindent,
        anchors=args.anchors,
        base=base,
    )
    pdf = asyncio.run(convert(markdown_text, options))
    write_output(pdf)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    configure()
    try:
        return run(argv)
    except Md2PdfError as exc:
        LOGGER.error("%s", exc.describe())
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_FAILURE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
