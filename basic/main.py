"""Uses the basic language implementation to interpret source files/run in command-line mode. Also uses error
handling context manager. Called from the basic console script.

Python version must be >=3.6, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from basic.lang.error import ErrorHandler
from basic.lang.session import Session
from basic.lang.shell import Shell


def main():
    """Runs basic interpreter. Called from basic console script."""
    assert sys.version_info >= (3, 6), "basic cannot be run with python < 3.6"

    parser = argparse.ArgumentParser(prog="basic")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", help="print the tokens of each expression instead of running it",
                        action="store_true")
    parser.add_argument("--ast", help="print the syntax tree of each expression instead of running it",
                        action="store_true")
    parser.add_argument("--no-color", help="do not highlight errors and warnings", action="store_true")
    args = parser.parse_args()

    mode = "tokens" if args.tokens else "ast" if args.ast else "run"

    with ErrorHandler(color=not args.no_color) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, mode=mode)

            for result in sess.run():
                output = Session.display(result)
                if output is not None:
                    print(output)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, mode=mode)).cmdloop()


if __name__ == "__main__":
    main()
