"""Handles interactive/command-line mode for the basic interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """basic interpreter shell."""
    intro = "basic interpreter :: Python backend\nType 'help' for more information."
    prompt = "basic> "
    secondary_prompt = "...    "  # used for line continuations
    _tmp_prompt = "basic> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary basic expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line, self.line_num, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not self.sess.is_blank(line):
                output = self.sess.display(self.sess.run_line(line, self.line_num))
                if output is not None:
                    print(output)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the basic interpreter!\n\n"
              "Every line is a single expression, and its value is printed. Variables and \n"
              "functions stay defined for the rest of the session.\n\n"
              "Try it out by typing 'fun add(a, b) -> a + b'. This will bind a function to \n"
              "the name 'add'. Next, try typing 'add(2, 3)', giving 5 as the result. Lists, \n"
              "'if ... then ... elif ... else', 'for i = 0 to 10 step 2 then ...' and \n"
              "'while ... then ...' are all expressions too.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn(f"unrecognized token: '{arg}'")
            return False
        return True
