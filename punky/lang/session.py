"""Session control for the punky language: parses and evaluates lines, either in command-line mode or file
interpretation mode, against one Environment that persists for the whole session.
"""

from punky.lang.error import EvaluationError, GenericException, ParseError
from punky.pure.environment import Environment
from punky.pure.evaluator import evaluate
from punky.pure.lexical import Lexer
from punky.pure.objects import EMPTY, Error
from punky.pure.parser import Parser


class Session:
    """Governs a punky session, with control over the root scope that every line binds into."""
    SH_FILE = "<in>"           # command-line interpreter filename
    RECURSION_LIMIT = 10000    # each punky call costs about ten Python frames

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()  # root scope, shared by every line of this session
        self.to_exec = {}         # dict of line num: (line, Program) to evaluate

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                self.add(expr, line_num)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev. Must be called before calling add.
        """
        line = line.rstrip()
        if exprs is not None:
            if add_to_prev and exprs:
                prev, first_line_num = exprs.pop()
                line = prev + " " + line.strip()
                exprs.append((line, first_line_num))
            elif line and not line.isspace():
                exprs.append((line, line_num))

        return line, Session.is_open(line)

    @staticmethod
    def is_open(line):
        """Whether line leaves a parenthesis or brace unclosed, meaning the statement continues on the next line."""
        return line.count("(") > line.count(")") or line.count("{") > line.count("}")

    def add(self, expr, line_num):
        """Parses expr and queues it for evaluation. Evaluation is delayed until run is called. Raises ParseError (and
        queues nothing) if the parser recorded any diagnostics.
        """
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        parser = Parser(Lexer(expr))
        program = parser.parse_program()
        if parser.diagnostics:
            raise ParseError(expr, parser.diagnostics)

        self.to_exec[line_num] = (expr, program)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's queued programs in order, yielding the rendering of each result worth displaying.
        Raises EvaluationError if a program evaluates to an Error object.
        """
        for line_num, (expr, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, expr, line_num)
            self.error_handler.register_step("ast", str(program))

            try:
                result = evaluate(program, self.env)
            finally:
                del self.to_exec[line_num]

            if isinstance(result, Error):
                raise EvaluationError(result.message)

            self.error_handler.remove_line(self.path)
            if result is not EMPTY:
                yield result.inspect()

    def __repr__(self):
        return f"{type(self).__name__}(path={self.path!r}, bindings={sorted(self.env.store)!r})"
