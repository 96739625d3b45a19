"""CLI Argument Parsing"""

import argparse
import argcomplete

from gentools import DEFAULT_MODEL, __version__


def _build_parser(prog: str, description: str, epilog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description, epilog=epilog)

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('model', nargs='?', default=None, metavar='MODEL',
                        help=f'Model name (default: {DEFAULT_MODEL}, or GEN_MODEL / .genrc)')
    parser.add_argument('--verbose', action='store_true', help='Show request details and token usage on stderr')

    argcomplete.autocomplete(parser)
    return parser


def commit_parser() -> argparse.ArgumentParser:
    return _build_parser(
        'gen-commit-msg',
        'Draft a conventional-commit message from the staged diff',
        'Example: git add . && gen-commit-msg gpt-4o (prints and copies the message)',
    )


def clipboard_parser() -> argparse.ArgumentParser:
    return _build_parser(
        'gen-clipboard-txt',
        'Save the clipboard text to a file named by the model',
        'Example: gen-clipboard-txt (writes e.g. meeting-notes.txt; requires OPENAI_ENDPOINT)',
    )


def parse_commit_args(argv: list[str] | None = None) -> argparse.Namespace:
    return commit_parser().parse_args(argv)


def parse_clipboard_args(argv: list[str] | None = None) -> argparse.Namespace:
    return clipboard_parser().parse_args(argv)
