"""
Query Planner - Creates execution plans from SELECT statements
"""

from typing import Any, Dict

from ..parser.ast import SelectStatement
from ..catalog.schema import DatabaseSchema, TableSchema
from .exceptions import QueryExecutionError


class QueryPlan:
    """Execution plan for a query"""

    def __init__(self, plan_type: str, details: Dict[str, Any] = None):
        self.plan_type = plan_type  # only 'SELECT' in read-only mode
        self.details = details or {}

    def __repr__(self):
        return f"QueryPlan({self.plan_type}, {self.details})"


class Planner:
    """Resolves names in a SELECT against one database"""

    def __init__(self, database: DatabaseSchema):
        self.database = database

    def plan_select(self, stmt: SelectStatement) -> QueryPlan:
        """Plan SELECT query"""
        table_schema = self.database.get_table(stmt.table)
        if not table_schema:
            raise QueryExecutionError(f'Table "{stmt.table}" not found')

        # Projection
        column_indices = []
        column_names = []
        for column in stmt.columns:
            if column == '*' or (column.endswith('.*') and
                                 self._valid_qualifier(column[:-2], stmt)):
                column_indices.extend(range(len(table_schema.columns)))
                column_names.extend(table_schema.columns)
            else:
                index = self._resolve_column(column, stmt, table_schema)
                column_indices.append(index)
                column_names.append(table_schema.columns[index])

        # WHERE
        filter_condition = None
        if stmt.where:
            filter_condition = {
                'column_index': self._resolve_column(stmt.where.column, stmt, table_schema),
                'operator': stmt.where.operator,
                'value': stmt.where.value,
            }

        # GROUP BY
        group_indices = [self._resolve_column(column, stmt, table_schema)
                         for column in stmt.group_by]

        # ORDER BY
        order_keys = [(self._resolve_column(item.column, stmt, table_schema), item.ascending)
                      for item in stmt.order_by]

        return QueryPlan('SELECT', {
            'table_name': table_schema.name,
            'table_schema': table_schema,
            'column_indices': column_indices,
            'column_names': column_names,
            'filter_condition': filter_condition,
            'group_indices': group_indices,
            'order_keys': order_keys,
            'limit': stmt.limit,
            'offset': stmt.offset,
        })

    def _valid_qualifier(self, qualifier: str, stmt: SelectStatement) -> bool:
        return qualifier in (stmt.table, stmt.table_alias)

    def _resolve_column(self, column: str, stmt: SelectStatement, table: TableSchema) -> int:
        """
        Resolve a (possibly qualified) column name to its index.

        Exact matches win; otherwise the first case-insensitive match is used.
        """
        name = column
        if '.' in column:
            qualifier, name = column.split('.', 1)
            if not self._valid_qualifier(qualifier, stmt):
                raise QueryExecutionError(f'Table "{qualifier}" not found')

        index = table.get_column_index(name)
        if index >= 0:
            return index
        for i, candidate in enumerate(table.columns):
            if candidate.lower() == name.lower():
                return i
        raise QueryExecutionError(f'Column "{column}" not found in table "{table.name}"')
