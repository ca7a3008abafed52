"""
Result Formatter - Renders query results and listings as console text
Output depends only on the data passed in and the statement's dialect.
"""

from typing import Any, List, Sequence

from .width import display_width, pad_to
from ..parser.ast import Dialect
from ..catalog.schema import TableSchema
from ..types.value import Value
from ..constants import DB_OWNER, DB_SCHEMA, DB_USER


PG_DATABASES_TITLE = '                                  List of databases'
PG_DATABASES_HEADER = '    Name    | Owner | Encoding |   Collate   |    Ctype    | Access privileges'
PG_DATABASES_SEPARATOR = '-----------+-------+----------+-------------+-------------+-------------------'
PG_DATABASES_ROW = ' {name}| ' + DB_OWNER + '  | UTF8     | en_US.UTF-8 | en_US.UTF-8 | '

MYSQL_DATABASES_BORDER = '+-------------+'
MYSQL_DATABASES_HEADER = '| Database    |'

PG_TABLES_TITLE = '             List of relations'
PG_TABLES_HEADER = ' Schema |     Name      | Type  | Owner'
PG_TABLES_SEPARATOR = '--------+--------------+-------+-------'
PG_TABLES_ROW = ' ' + DB_SCHEMA + ' | {name} | table | ' + DB_OWNER

DESCRIBE_COLUMNS = ['Column', 'Type', 'Collation', 'Nullable', 'Default']
PG_DESCRIBE_TITLE = '                                Table "{db}.' + DB_SCHEMA + '.{table}"'
PG_DESCRIBE_HEADER = ' Column              | Type                        | Collation | Nullable | Default'
PG_DESCRIBE_SEPARATOR = '--------------------+----------------------------+-----------+----------+---------'
PG_DESCRIBE_ROW = ' {column}| {type}|           | not null | '


def stringify(cell: Any) -> str:
    """Console text of one cell; None prints as NULL"""
    return Value(cell).to_display()


def column_widths(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> List[int]:
    """Widest rendered cell per column, header included"""
    widths = [display_width(column) for column in columns]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], display_width(stringify(cell)))
    return widths


def row_count_footer(count: int) -> str:
    return f"({count} {'row' if count == 1 else 'rows'})"


def format_table(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """
    Render a result set:

        id | name
        ---+---------
        1  | 山田太郎
        (1 row)

    Args:
        columns: column headers
        rows: row values aligned with columns

    Returns:
        The rendered table, or "(0 rows)" for an empty result.
    """
    if not rows:
        return row_count_footer(0)

    widths = column_widths(columns, rows)
    lines = [' | '.join(pad_to(column, width) for column, width in zip(columns, widths)),
             '-+-'.join('-' * width for width in widths)]
    for row in rows:
        lines.append(' | '.join(pad_to(stringify(cell), width)
                                for cell, width in zip(row, widths)))
    lines.append(row_count_footer(len(rows)))
    return '\n'.join(lines)


def format_boxed_table(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render rows inside a mysql-client style +---+ box"""
    widths = column_widths(columns, rows)
    border = '+-' + '-+-'.join('-' * width for width in widths) + '-+'

    def line(cells):
        return '| ' + ' | '.join(pad_to(cell, width) for cell, width in zip(cells, widths)) + ' |'

    lines = [border, line(columns), border]
    lines.extend(line([stringify(cell) for cell in row]) for row in rows)
    lines.append(border)
    return '\n'.join(lines) + '\n'


def format_database_list(names: Sequence[str], dialect: Dialect) -> str:
    """\\l (PostgreSQL) or SHOW DATABASES; (MySQL)"""
    if dialect == Dialect.POSTGRES:
        lines = [PG_DATABASES_TITLE, PG_DATABASES_HEADER, PG_DATABASES_SEPARATOR]
        lines.extend(PG_DATABASES_ROW.format(name=name.ljust(10)) for name in names)
    else:
        lines = [MYSQL_DATABASES_BORDER, MYSQL_DATABASES_HEADER, MYSQL_DATABASES_BORDER]
        lines.extend(f"| {name.ljust(11)} |" for name in names)
        lines.append(MYSQL_DATABASES_BORDER)
    return ''.join(line + '\n' for line in lines)


def format_table_list(names: Sequence[str], current_database: str, dialect: Dialect) -> str:
    """\\dt (PostgreSQL) or SHOW TABLES; (MySQL)"""
    if dialect == Dialect.POSTGRES:
        lines = [PG_TABLES_TITLE, PG_TABLES_HEADER, PG_TABLES_SEPARATOR]
        lines.extend(PG_TABLES_ROW.format(name=name.ljust(12)) for name in names)
    else:
        title = f"Tables_in_{current_database}"
        width = max([len(title)] + [len(name) for name in names]) + 4
        border = '+' + '-' * width + '+'
        lines = [border, '| ' + title.ljust(width - 2) + ' |', border]
        lines.extend('| ' + name.ljust(width - 2) + ' |' for name in names)
        lines.append(border)
    return ''.join(line + '\n' for line in lines)


def format_describe(table: TableSchema, current_database: str, dialect: Dialect) -> str:
    """
    \\d table / DESCRIBE table;

    Types are inferred from the first data row; every column is reported
    as not null without a default.
    """
    types = [table.column_type(column).value for column in table.columns]

    if dialect == Dialect.POSTGRES:
        lines = [PG_DESCRIBE_TITLE.format(db=current_database, table=table.name),
                 PG_DESCRIBE_HEADER, PG_DESCRIBE_SEPARATOR]
        lines.extend(PG_DESCRIBE_ROW.format(column=column.ljust(19), type=type_name.ljust(27))
                     for column, type_name in zip(table.columns, types))
        return ''.join(line + '\n' for line in lines)

    rows = [[column, type_name, '', 'not null', ''] for column, type_name in zip(table.columns, types)]
    return format_boxed_table(DESCRIBE_COLUMNS, rows)


def format_use_database(db_name: str, dialect: Dialect) -> str:
    if dialect == Dialect.POSTGRES:
        return f'You are now connected to database "{db_name}" as user "{DB_USER}"'
    return f"Database changed to {db_name}"


def format_error(message: str, line: int, token: str, dialect: Dialect) -> str:
    """psql prefixes errors and echoes the offending line/token"""
    if dialect == Dialect.POSTGRES:
        return f"ERROR:  {message}\n行 {line}: {token}"
    return message
