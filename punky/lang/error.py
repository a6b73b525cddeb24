"""Reporting for everything that can go wrong while a punky session runs.

Two kinds of failure reach this module:
- punky errors: GenericException and its subclasses (ParseError, EvaluationError), raised by the session layer
- Python errors: anything else, which means a bug in the interpreter itself and is reported as [internal]

Runtime errors inside a punky program are Error objects, not exceptions (see pure/evaluator.py). The session converts
a line's Error result into an EvaluationError once the whole line has been evaluated.
"""

import sys

from termcolor import colored


def bold(text, color=None):
    return colored(text, color, attrs=["bold"])


class GenericException(Exception):
    """A punky error with a message template. Each of exprs (source snippets) fills one {} slot of msg, in bold.
    exprs[0] is the snippet the error is about: start and end index into it for the caret diagnosis.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = exprs or []

        if exprs:
            msg = msg.format(*map(bold, exprs))
        super().__init__(msg)

        self.msg = msg
        self.expr = exprs[0] if exprs else ""
        self.start = start
        self.end = len(self.expr) if end == -1 else end
        self.diagnosis = diagnosis
        self.internal = internal


class ParseError(GenericException):
    """A line that could not be parsed. Carries every Diagnostic the parser recorded, in order."""

    def __init__(self, line, diagnostics):
        super().__init__("could not parse '{}'", line, diagnosis=False)
        self.line = line
        self.diagnostics = list(diagnostics)


class EvaluationError(GenericException):
    """A line whose evaluation produced an Error object."""

    def __init__(self, message):
        super().__init__(message, diagnosis=False)


class ErrorHandler:
    """Context manager around session work. punky errors are printed and swallowed (or end the process when fatal);
    Python errors are printed as internal errors and re-raised.

    traceback maps each registered file to the (line, line_num) being processed in it, or (None, None) when idle.
    """
    ERROR = "red"
    STEP = "cyan"

    # Python exceptions that a punky program can legitimately cause
    INTERRUPTIONS = {
        KeyboardInterrupt: "keyboard interrupt",
        RecursionError: "maximum recursion depth exceeded",
    }

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line as in progress in path, so a failure while handling it can point at it."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Marks path as idle again once its line went through without error."""
        self.traceback[path] = (None, None)

    def register_step(self, label, text):
        """Traces one evaluation step (e.g. the parsed form of a line) when verbose."""
        if self.verbose:
            print(bold(f"{label}: ", ErrorHandler.STEP) + text)

    @staticmethod
    def diagnose(expr, start, end):
        """Renders expr with [start, end) highlighted, and a caret line underneath pointing at it."""
        end = max(end, start + 1)
        highlighted = expr[:start] + bold(expr[start:end], ErrorHandler.ERROR) + expr[end:]
        caret = " " * start + bold("^" + "~" * (end - start - 1), ErrorHandler.ERROR)
        return f"  {highlighted}\n  {caret}"

    def origin(self):
        """Where the error came from: one File/line entry per registered file that has a line in progress."""
        entries = [f"  File '{file}', line {line_num}:\n    {line}\n"
                   for file, (line, line_num) in self.traceback.items() if line]
        header = "Traceback:\n" if len(entries) > 1 else ""
        return header + "".join(entries)

    def throw(self, error):
        """Prints error (a GenericException) with its origin, then exits if fatal or resets the traceback if not."""
        prefix = bold("[internal] ", ErrorHandler.ERROR) if error.internal else ""
        print(self.origin() + prefix + bold("error: ", ErrorHandler.ERROR) + error.msg)

        if error.expr and error.diagnosis and not error.internal:
            print(ErrorHandler.diagnose(error.expr, error.start, error.end))

        if isinstance(error, ParseError):
            for diagnostic in error.diagnostics:
                print(colored("  parse error: ", ErrorHandler.ERROR) + diagnostic.message)
                if diagnostic.column >= 0:
                    print(ErrorHandler.diagnose(error.line, diagnostic.column, diagnostic.column + 1))

        if self.fatal:
            sys.exit(1)
        self.traceback = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False
        elif issubclass(exc_type, SystemExit):
            return False
        elif exc_type in ErrorHandler.INTERRUPTIONS:
            self.throw(GenericException(ErrorHandler.INTERRUPTIONS[exc_type]))
            return True
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
            return True

        self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
        return False
