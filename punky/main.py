"""Runs the punky interpreter on a source file, or in command-line mode. Also uses the error handling context manager.
Installed as the `punky` console script.
"""

import argparse
import os
import sys

from punky.lang.error import ErrorHandler
from punky.lang.session import Session
from punky.lang.shell import Shell


def main():
    """Runs punky interpreter. Called from punky console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="punky")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--history", default=os.path.expanduser("~/.punky_history"),
                            help="file to load/save command-line history from (default: %(default)s)")
        parser.add_argument("-v", "--verbose", action="store_true",
                            help="print the parsed form of each line before its result")
        args = parser.parse_args()

        error_handler.verbose = args.verbose
        sys.setrecursionlimit(max(sys.getrecursionlimit(), Session.RECURSION_LIMIT))

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            for output in sess.run():
                print(output)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True), args.history).cmdloop()


if __name__ == "__main__":
    main()
