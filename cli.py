"""Convert regular expressions to NFAs and print them in Graphviz DOT format.

    $ regex2nfa nfa 'a(bc|bd)*(e|f)'
    $ regex2nfa nfa 'ab+' --render ab --format svg
    $ regex2nfa file patterns.txt
"""

import argparse
import logging
import platform
import sys
from typing_extensions import *

import graphviz

from automaton import render_file
from errors import RegexError
from io_utils import load_patterns
from thompson import RegularExpression

__version__ = "0.1.0"

logger = logging.getLogger("regex2nfa")

version_text = "regex2nfa {} on {} {}".format(
    __version__, platform.python_implementation(), platform.python_version()
)


def log_level(s):
    """Converts a string to a valid logging level"""
    numeric_level = getattr(logging, s.upper(), None)
    if not isinstance(numeric_level, int):
        raise argparse.ArgumentTypeError("Invalid log level: {}".format(s))
    return numeric_level


base_parser = argparse.ArgumentParser(add_help=False)
base_parser.add_argument(
    "--log", help="Log level (debug,info,warning,error)", metavar="log-level",
    type=log_level, default=None)
base_parser.add_argument(
    "--verbose", "-v", action="count", default=0,
    help="Increase verbosity of the output")

render_parser = argparse.ArgumentParser(add_help=False)
render_parser.add_argument(
    "--epsilon-label", default=" ", metavar="text",
    help="label drawn on epsilon transitions (default: a blank)")

parser = argparse.ArgumentParser(
    prog="regex2nfa",
    description=__doc__,
    formatter_class=argparse.RawDescriptionHelpFormatter)
parser.add_argument(
    "--version", "-V", action="version", version=version_text,
    help="Display version and exit")
subparsers = parser.add_subparsers(dest="command", metavar="command")
subparsers.required = True

nfa_parser = subparsers.add_parser(
    "nfa", parents=[base_parser, render_parser],
    help="Convert the regular expression to NFA, and output it in DOT format.")
nfa_parser.add_argument("regex", help="the regular expression")
nfa_parser.add_argument(
    "--render", metavar="file",
    help="also render the graph to this file with Graphviz")
nfa_parser.add_argument(
    "--format", default="png", help="output format for --render (default: png)")
nfa_parser.add_argument(
    "--view", action="store_true", default=False,
    help="open the rendered file")

file_parser = subparsers.add_parser(
    "file", parents=[base_parser, render_parser],
    help="Convert every named pattern in a file and output them in DOT format.")
file_parser.add_argument("path", help="file with 'NAME: pattern' lines")
file_parser.add_argument(
    "names", nargs="*", metavar="name", help="only convert these patterns")


class LogSetup:
    """Context manager that attaches a stderr log handler for one command"""

    def __init__(self, args):
        self.args = args
        self.handler = None
        self.level = None

    def __enter__(self):
        if self.args.log is not None:
            level = self.args.log
        elif self.args.verbose >= 2:
            level = logging.DEBUG
        elif self.args.verbose == 1:
            level = logging.INFO
        else:
            level = logging.WARNING

        self.handler = logging.StreamHandler(sys.stderr)
        self.handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
        root = logging.getLogger()
        self.level = root.level
        root.addHandler(self.handler)
        root.setLevel(level)
        logger.debug("%s", version_text)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        root = logging.getLogger()
        root.removeHandler(self.handler)
        root.setLevel(self.level)


def _nfa(args) -> None:
    compiled = RegularExpression.from_string(args.regex).to_nfa()
    logger.info(
        "%r: %d states, %d transitions",
        args.regex,
        compiled.nfa.num_states,
        compiled.nfa.transition_count(),
    )
    dot = compiled.to_graphviz(epsilon_label=args.epsilon_label)
    print(dot.source, end="")
    if args.render:
        render_file(dot, args.render, format=args.format, view=args.view)


def _file(args) -> None:
    patterns = load_patterns(args.path)
    missing = [name for name in args.names if name not in patterns]
    if missing:
        raise ValueError(f"Pattern not found: {', '.join(missing)}")

    for name, pattern in patterns.items():
        if args.names and name not in args.names:
            continue
        dot = RegularExpression(pattern).to_graphviz(
            epsilon_label=args.epsilon_label, name=name
        )
        print(dot.source, end="")


COMMANDS = {
    "nfa": _nfa,
    "file": _file,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parser.parse_args(argv)
    with LogSetup(args):
        try:
            COMMANDS[args.command](args)
        except RegexError as e:
            logger.debug("compilation failed", exc_info=True)
            print(f"error: {e}", file=sys.stderr)
            return 1
        except (OSError, ValueError, graphviz.ExecutableNotFound) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
