"""
AST Nodes - Parsed console statements
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class Dialect(Enum):
    """Output style a statement is rendered in"""
    POSTGRES = 'postgres'
    MYSQL = 'mysql'

    @classmethod
    def of(cls, command: Optional[str]) -> 'Dialect':
        """Backslash-prefixed commands are PostgreSQL style, everything else MySQL"""
        if command and command.lstrip().startswith('\\'):
            return cls.POSTGRES
        return cls.MYSQL


@dataclass(frozen=True)
class Statement:
    """Base statement node"""
    original_command: str

    @property
    def dialect(self) -> Dialect:
        return Dialect.of(self.original_command)


@dataclass(frozen=True)
class ShowDatabases(Statement):
    """SHOW DATABASES; / \\l"""
    pass


@dataclass(frozen=True)
class ShowTables(Statement):
    """SHOW TABLES; / \\dt / \\d"""
    pass


@dataclass(frozen=True)
class WhereCondition:
    """Single comparison: column op literal"""
    column: str
    operator: str  # =, !=, <, >, <=, >=, LIKE
    value: Union[str, int, float]


@dataclass(frozen=True)
class OrderByClause:
    """ORDER BY item"""
    column: str
    direction: str = 'ASC'

    @property
    def ascending(self) -> bool:
        return self.direction == 'ASC'


@dataclass(frozen=True)
class SelectStatement(Statement):
    """SELECT statement"""
    columns: List[str]
    table: str
    table_alias: Optional[str] = None  # e.g. FROM engineers e
    where: Optional[WhereCondition] = None
    group_by: List[str] = field(default_factory=list)
    order_by: List[OrderByClause] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class UseDatabase(Statement):
    """USE db; / \\c db"""
    database: str


@dataclass(frozen=True)
class DescribeTable(Statement):
    """DESCRIBE t; / DESC t; / SHOW COLUMNS FROM t; / \\d t"""
    table: str


@dataclass(frozen=True)
class Exit(Statement):
    """\\q / exit"""
    pass


@dataclass(frozen=True)
class Cancel(Statement):
    """Ctrl-C"""
    pass


@dataclass(frozen=True)
class ErrorStatement(Statement):
    """Input that could not be understood"""
    message: str
    error_token: str = ''


@dataclass(frozen=True)
class ReadOnlyStatement(Statement):
    """INSERT / UPDATE / DELETE / CREATE TABLE / DROP TABLE, always rejected"""
    operation: str
