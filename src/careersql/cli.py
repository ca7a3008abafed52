"""
Command Line Interface Module - Shell mode plus the SQL console
"""

import cmd
import logging
import sys

from .catalog.catalog import Catalog
from .catalog.schema import CatalogError
from .completion.completer import current_word
from .session import Session
from .terminal import Terminal
from .constants import (DB_PROMPT_SUFFIX, DEFAULT_SHELL_HISTORY, LOG_FORMAT, LOG_LEVEL,
                        SHELL_PROMPT, SQL_PROMPT)


class CareerSQLREPL(cmd.Cmd):
    """Interactive shell hosting the CareerSQL console"""

    intro = """
    ╔══════════════════════════════════════╗
    ║      CareerSQL Console               ║
    ║      Type 'sql' to open the console  ║
    ║      Type 'ls' to list files         ║
    ╚══════════════════════════════════════╝

    Inside the console:
      \\l, SHOW DATABASES;      list databases
      \\c db, USE db;           connect
      \\dt, SHOW TABLES;        list tables
      \\d t, DESCRIBE t;        describe a table
      SELECT ... FROM t ...;   query
      \\q, exit                 back to the shell
    """
    prompt = SHELL_PROMPT

    def __init__(self, catalog: Catalog = None, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.catalog = catalog if catalog is not None else Catalog.from_file()
        self.session = Session(self.catalog)
        self.terminal = Terminal()
        self.sql_mode = False
        self.shell_history = list(DEFAULT_SHELL_HISTORY)

    def _write(self, text: str) -> None:
        if text.endswith('\n'):
            self.stdout.write(text)
        else:
            self.stdout.write(text + '\n')

    def _refresh_prompt(self) -> None:
        if not self.sql_mode:
            self.prompt = SHELL_PROMPT
        elif self.session.current_database:
            self.prompt = f"{self.session.current_database}{DB_PROMPT_SUFFIX}"
        else:
            self.prompt = SQL_PROMPT

    def onecmd(self, line: str) -> bool:
        """SQL mode bypasses do_* dispatch entirely"""
        if self.sql_mode:
            if line == 'EOF':
                # Ctrl-D closes the console and the shell together
                self.session.close()
                self.sql_mode = False
                self._refresh_prompt()
                return self.do_EOF('')
            return self._handle_sql(line)
        if line.strip():
            self.shell_history.insert(0, line.strip())
        return super().onecmd(line)

    def emptyline(self) -> bool:
        """Do nothing (cmd repeats the last command by default)"""
        return False

    def _handle_sql(self, line: str) -> bool:
        output = self.session.submit(line)
        if output:
            self._write(output)
        if self.session.exited:
            self.session.exited = False
            self.sql_mode = False
        self._refresh_prompt()
        return False

    def cancel(self) -> None:
        """Ctrl-C inside the console"""
        self._write(self.session.cancel())
        self._refresh_prompt()

    # Shell mode commands

    def _run_terminal(self, line: str) -> None:
        result = self.terminal.execute(line)
        if result.clear:
            self.stdout.write('\033[2J\033[H')
        if result.enter_sql:
            self.sql_mode = True
            self._refresh_prompt()
            return
        if result.image:
            self._write(f"[image] {result.image}")
        elif result.output:
            self._write(result.output)

    def do_ls(self, arg):
        """List files: ls [-a] [-l] [-h]"""
        self._run_terminal(f"ls {arg}")

    def do_imgcat(self, arg):
        """Show an image: imgcat <file>"""
        self._run_terminal(f"imgcat {arg}")

    def do_img2sixel(self, arg):
        """Show an image: img2sixel <file>"""
        self._run_terminal(f"img2sixel {arg}")

    def complete_imgcat(self, text, line, begidx, endidx):
        return [f for f in self.terminal.files if f.startswith(text)]

    complete_img2sixel = complete_imgcat

    def do_clear(self, arg):
        """Clear the screen"""
        self._run_terminal('clear')

    def do_sql(self, arg):
        """Open the SQL console"""
        self._run_terminal('sql')

    def do_quit(self, arg):
        """Exit the REPL"""
        self._write("Goodbye!")
        return True

    def do_exit(self, arg):
        """Exit the REPL"""
        return self.do_quit(arg)

    def do_EOF(self, arg):
        """Exit on Ctrl-D"""
        self._write('')
        return self.do_quit(arg)

    def default(self, line: str) -> None:
        """Anything else is handed to the terminal (prints 'command not found')"""
        self._run_terminal(line)

    # Completion

    def _complete_sql(self, text: str, line: str, endidx: int):
        candidates = self.session.complete(line[:endidx])
        # readline replaces only `text`, which may be shorter than our word
        offset = len(current_word(line[:endidx])) - len(text)
        if offset > 0:
            candidates = [c[offset:] for c in candidates]
        return candidates

    def completenames(self, text, line, begidx, endidx):
        if self.sql_mode:
            return self._complete_sql(text, line, endidx)
        return super().completenames(text, line, begidx, endidx)

    def completedefault(self, text, line, begidx, endidx):
        if self.sql_mode:
            return self._complete_sql(text, line, endidx)
        return []


def main():
    logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)
    try:
        repl = CareerSQLREPL()
    except CatalogError as e:
        print(f"Error loading dataset: {e}")
        sys.exit(1)

    while True:
        try:
            repl.cmdloop()
            break
        except KeyboardInterrupt:
            print()
            if not repl.sql_mode:
                print("Exiting...")
                break
            repl.cancel()
            repl.intro = ''


if __name__ == "__main__":
    main()
