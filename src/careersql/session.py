"""
Console Session - Per-connection state and statement dispatch
"""

import logging
from typing import List, Optional

from .catalog.catalog import Catalog
from .completion.completer import SQLCompleter
from .display import formatter
from .parser.ast import *
from .parser.parser import parse
from .query.engine import QueryEngine
from .query.exceptions import QueryExecutionError
from .constants import READ_ONLY_ERROR


logger = logging.getLogger(__name__)

NO_DATABASE_ERROR = 'Error: No database selected'


class Session:
    """
    One console session.

    Holds the current database, the last dispatched command, command history
    and the buffer of a statement still waiting for its terminator. Nothing
    here is shared between sessions.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.engine = QueryEngine(catalog)
        self.completer = SQLCompleter(catalog)
        self.current_database: Optional[str] = None
        self.last_command: Optional[str] = None
        self.command_history: List[str] = []  # most recent first
        self.history_cursor = -1  # -1: not browsing
        self.pending_command: Optional[str] = None
        self.exited = False

    @property
    def is_pending(self) -> bool:
        return self.pending_command is not None

    def submit(self, line: str) -> Optional[str]:
        """
        Feed one line of input.

        Returns:
            The text to print, or None when nothing is printed (statement
            still incomplete, or an unknown meta-command).
        """
        self.history_cursor = -1
        stripped = line.strip()

        if stripped.startswith('\\'):
            # Meta-commands never buffer
            self.pending_command = None
            statement = parse(stripped)
            if statement is None:
                return None
            self._remember(stripped)
            return self.execute(statement)

        if stripped == ';' and self.pending_command is not None:
            command = self.pending_command + ';'
        elif self.pending_command is not None:
            command = f"{self.pending_command}\n{line}"
        else:
            command = line

        if not command.strip():
            return None

        statement = parse(command)
        if statement is None:
            self.pending_command = command
            logger.debug("Buffered incomplete statement: %r", command)
            return None

        self.pending_command = None
        self._remember(command.strip())
        return self.execute(statement)

    def execute(self, statement: Statement) -> str:
        """Dispatch a parsed statement and render its output"""
        self.last_command = statement.original_command
        dialect = statement.dialect
        logger.debug("Dispatching %s (%s)", type(statement).__name__, dialect.value)

        if isinstance(statement, Cancel):
            self.pending_command = None
            return '^C'

        if isinstance(statement, ErrorStatement):
            return formatter.format_error(statement.message, 1, statement.error_token, dialect)

        if isinstance(statement, ShowDatabases):
            return formatter.format_database_list(self.catalog.list_databases(), dialect)

        if isinstance(statement, ShowTables):
            if not self.current_database:
                return NO_DATABASE_ERROR
            return formatter.format_table_list(self.catalog.list_tables(self.current_database),
                                               self.current_database, dialect)

        if isinstance(statement, UseDatabase):
            return self.use_database(statement.database, dialect)

        if isinstance(statement, DescribeTable):
            if not self.current_database:
                return NO_DATABASE_ERROR
            table = self.catalog.get_table(self.current_database, statement.table)
            if table is None:
                return f'Error: Table "{statement.table}" not found'
            return formatter.format_describe(table, self.current_database, dialect)

        if isinstance(statement, SelectStatement):
            return self.select(statement)

        if isinstance(statement, ReadOnlyStatement):
            return READ_ONLY_ERROR.format(operation=statement.operation)

        if isinstance(statement, Exit):
            self.exited = True
            self.pending_command = None
            return 'Bye'

        return f"Error: Unknown query type: {type(statement).__name__}"

    def use_database(self, db_name: str, dialect: Dialect) -> str:
        if not self.catalog.has_database(db_name):
            return f'Error: Database "{db_name}" does not exist'
        self.current_database = db_name
        return formatter.format_use_database(db_name, dialect)

    def select(self, statement: SelectStatement) -> str:
        if not self.current_database:
            return NO_DATABASE_ERROR
        try:
            result = self.engine.execute(statement, self.current_database)
        except QueryExecutionError as e:
            logger.warning("Query failed: %s", e)
            return f"Error: {e}"
        except Exception as e:
            logger.exception("Query engine failure")
            return f"Error: {e}"
        return formatter.format_table(result['columns'], result['data'])

    def cancel(self) -> str:
        """Ctrl-C: drop the pending statement"""
        return self.execute(Cancel(''))

    def complete(self, text: str) -> List[str]:
        return self.completer.complete(text, self.current_database)

    def _remember(self, command: str) -> None:
        self.command_history.insert(0, command)

    def history_previous(self) -> Optional[str]:
        """Step back in history (ArrowUp); None when already at the oldest entry"""
        if self.history_cursor >= len(self.command_history) - 1:
            return None
        self.history_cursor += 1
        return self.command_history[self.history_cursor]

    def history_next(self) -> Optional[str]:
        """Step forward in history (ArrowDown); '' once past the newest entry"""
        if self.history_cursor > 0:
            self.history_cursor -= 1
            return self.command_history[self.history_cursor]
        if self.history_cursor == 0:
            self.history_cursor = -1
            return ''
        return None

    def close(self) -> None:
        """Forget all per-session state"""
        self.current_database = None
        self.last_command = None
        self.command_history = []
        self.history_cursor = -1
        self.pending_command = None
        self.exited = False
