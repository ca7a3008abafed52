"""
SQL Completer - Context-aware tab completion for the console

The syntactic position of the cursor (after FROM, inside WHERE, after
SELECT, ...) decides which kind of name is offered; candidates are then
filtered by the word being typed.
"""

import logging
import re
from typing import Iterable, List, Optional, Tuple

from ..catalog.catalog import Catalog
from ..constants import META_COMMANDS


logger = logging.getLogger(__name__)

KEYWORDS = [
    'SELECT', 'FROM', 'WHERE', 'GROUP BY', 'ORDER BY', 'LIMIT',
    'USE', 'SHOW', 'DESCRIBE', 'TABLES', 'DATABASES', 'EXIT',
    'JOIN', 'LEFT JOIN', 'RIGHT JOIN', 'INNER JOIN', 'ON',
    'AND', 'OR', 'NOT', 'IN', 'LIKE', 'IS NULL', 'IS NOT NULL',
    'ASC', 'DESC', 'HAVING',
]

# Words that can follow a table name but are never its alias
RESERVED_WORDS = {
    'where', 'group', 'order', 'limit', 'offset', 'having', 'join', 'left',
    'right', 'inner', 'outer', 'full', 'cross', 'natural', 'on', 'using',
    'as', 'and', 'or', 'union', 'set', 'values',
}

FROM_REFERENCE = re.compile(r'\bfrom\s+(\w+)(?:\s+(?:as\s+)?(\w+))?')
JOIN_REFERENCE = re.compile(r'\bjoin\s+(\w+)(?:\s+(?:as\s+)?(\w+))?')

CONDITION_CONTEXT = re.compile(r'\b(?:where|and|or|on)\s+[\w.]*$')
JOIN_RHS_CONTEXT = re.compile(r'\bon\s+[\w.]+\s*(?:=|!=|<>|<=|>=|<|>)\s*[\w.]*$')
TABLE_CONTEXT = re.compile(r'\b(?:from|join)\s+\w*$')
GROUP_ORDER_CONTEXT = re.compile(r'\b(?:group|order)\s+by\s+(?:.*,\s*)?[\w.]*$')
HAVING_CONTEXT = re.compile(r'\bhaving\s+[\w.]*$')

WORD_BOUNDARY = re.compile(r'[\s,]+')


def current_word(text: str) -> str:
    """The word being typed: text after the last whitespace or comma"""
    return WORD_BOUNDARY.split(text)[-1]


def table_references(text: str) -> List[Tuple[str, Optional[str]]]:
    """(table, alias) pairs from the FROM clause and every JOIN, in order"""
    references = []
    matches = []
    from_match = FROM_REFERENCE.search(text)
    if from_match:
        matches.append(from_match)
    matches.extend(JOIN_REFERENCE.finditer(text))

    for match in matches:
        table, alias = match.group(1), match.group(2)
        if alias in RESERVED_WORDS:
            alias = None
        references.append((table, alias))
    return references


def _unique(candidates: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(candidates))


class SQLCompleter:
    """Completion candidates over a catalog for one current database"""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def complete(self, text: str, current_database: Optional[str]) -> List[str]:
        """
        Candidates for the word at the end of text.

        Args:
            text: input up to the cursor
            current_database: database the session is connected to, if any

        Returns:
            Ordered, de-duplicated candidates whose lower-case form starts
            with the lower-case word being typed.
        """
        prefix = current_word(text).lower()
        candidates = self._candidates(text.lower().lstrip(), current_database)
        return _unique(c for c in candidates if c.lower().startswith(prefix))

    def _candidates(self, context: str, current_database: Optional[str]) -> List[str]:
        if context.startswith('\\') and not re.search(r'\s', context):
            return META_COMMANDS

        if context.startswith('use ') or context.startswith('\\c '):
            return self.catalog.list_databases()

        if self.catalog.get_database(current_database) is None:
            return []

        tables = self.catalog.list_tables(current_database)

        if context.startswith('\\d '):
            return tables

        references = table_references(context)

        if CONDITION_CONTEXT.search(context) or JOIN_RHS_CONTEXT.search(context):
            logger.debug("Completing condition columns")
            return self._referenced_columns(references, current_database)

        if TABLE_CONTEXT.search(context):
            logger.debug("Completing table names")
            return tables

        if GROUP_ORDER_CONTEXT.search(context) or HAVING_CONTEXT.search(context):
            logger.debug("Completing grouping/ordering columns")
            return self._referenced_columns(references, current_database)

        if context.startswith('select '):
            if references:
                return self._referenced_columns(references, current_database)
            return self._all_columns(current_database)

        return KEYWORDS

    def _referenced_columns(self, references: List[Tuple[str, Optional[str]]],
                            current_database: str) -> List[str]:
        """Columns of referenced tables; aliased tables offer alias.column first"""
        columns = []
        for table_name, alias in references:
            table = self.catalog.get_table(current_database, table_name)
            if table is None:
                continue
            if alias:
                columns.extend(f"{alias}.{column}" for column in table.columns)
            columns.extend(table.columns)
        return columns

    def _all_columns(self, current_database: str) -> List[str]:
        columns = []
        for table_name in self.catalog.list_tables(current_database):
            columns.extend(self.catalog.list_columns(current_database, table_name))
        return columns


def complete(text: str, catalog: Catalog, current_database: Optional[str]) -> List[str]:
    """Completion candidates for text against a catalog"""
    return SQLCompleter(catalog).complete(text, current_database)
