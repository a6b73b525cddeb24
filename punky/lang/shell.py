"""Handles interactive/command-line mode for the punky interpreter. Uses cmd as backend, and readline (when the
platform has it) for line editing and a persistent input history.
"""

import cmd
import os

try:
    import readline
except ImportError:  # e.g. Windows without pyreadline: no history, plain input()
    readline = None


class Shell(cmd.Cmd):
    """punky interpreter shell."""
    intro = "punky interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = "punky >> "
    secondary_prompt = ". "   # used for line continuations
    _tmp_prompt = "punky >> "  # also used for prompt swapping in line continuations
    COMMANDS = ("help", "?", "exit", "EOF")  # only these exact lines bypass evaluation

    def __init__(self, sess, history_path=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.history_path = history_path

        self._tmp_line = ""
        self.line_num = 0

    def preloop(self):
        """Loads input history, if there is any."""
        if readline is not None and self.history_path and os.path.exists(self.history_path):
            readline.read_history_file(self.history_path)

    def postloop(self):
        """Saves input history."""
        if readline is not None and self.history_path:
            readline.write_history_file(self.history_path)

    def onecmd(self, line):
        """Runs a shell command only when the whole line is its name. Anything else, even a line starting with a command
        name like 'help(1)' or 'exit + 1', is punky source.
        """
        if not line.strip() or line.strip() in Shell.COMMANDS:
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Executes arbitrary punky statement(s)."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if self._tmp_line:
                line = self._tmp_line + " " + line.strip()
            line, add_to_prev = self.sess.preprocess_line(line, self.line_num, bool(self._tmp_line))

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                self.sess.add(line, self.line_num)
                for output in self.sess.run():
                    print(output)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the punky interpreter!\n\n"
              "punky is a small expression language with integers, booleans, first-class \n"
              "functions and closures. Every line is evaluated as soon as it is complete, and \n"
              "bindings persist for the rest of the session.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. This will bind a function \n"
              "to the name 'add'. Next, try typing 'add(1, 2)', giving '3' as the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
