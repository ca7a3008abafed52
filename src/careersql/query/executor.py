"""
Query Executor - Executes query plans against the in-memory catalog
"""

from typing import Any, Dict, List, Optional

from ..types.value import Value
from .exceptions import QueryExecutionError


class Row:
    """Dataset row wrapped in typed values"""

    def __init__(self, values: List[Value], row_id: int = 0):
        self.values = values
        self.row_id = row_id  # Position in the source table

    @classmethod
    def from_raw(cls, raw: List[Any], row_id: int = 0) -> 'Row':
        return cls([Value(item) for item in raw], row_id)

    def get_value(self, column_index: int) -> Value:
        if not 0 <= column_index < len(self.values):
            raise IndexError(f"Row {self.row_id} has no column {column_index}")
        return self.values[column_index]

    def raw(self) -> List[Any]:
        return [value.value for value in self.values]

    def __repr__(self):
        return f"Row#{self.row_id}{self.raw()!r}"


class Executor:
    """Runs SELECT plans: filter, group, sort, offset/limit, project"""

    def execute(self, plan: Dict[str, Any]) -> List[Row]:
        """Dispatch on plan_type (only SELECT plans exist)"""
        if plan.get('plan_type') != 'SELECT':
            raise QueryExecutionError(f"Unsupported plan type: {plan.get('plan_type')}")
        return self.execute_select(plan)

    def execute_select(self, plan: Dict[str, Any]) -> List[Row]:
        """Execute SELECT query"""
        table_schema = plan['table_schema']
        column_indices = plan['column_indices']
        condition = plan.get('filter_condition')
        group_indices = plan.get('group_indices') or []
        order_keys = plan.get('order_keys') or []
        limit = plan.get('limit')
        offset = plan.get('offset') or 0

        # Scan + WHERE
        rows = []
        for row_id, raw in enumerate(table_schema.rows):
            row = Row.from_raw(raw, row_id)
            if self._row_matches_condition(row, condition):
                rows.append(row)

        # GROUP BY keeps the first row of each group
        if group_indices:
            rows = self._group_rows(rows, group_indices)

        # ORDER BY, applied right-to-left so earlier keys dominate (stable sort)
        for column_index, ascending in reversed(order_keys):
            rows.sort(key=lambda r: r.get_value(column_index).sort_key(),
                      reverse=not ascending)

        # OFFSET / LIMIT
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]

        # Projection
        return [Row([row.get_value(i) for i in column_indices], row.row_id) for row in rows]

    def _row_matches_condition(self, row: Row, condition: Optional[Dict[str, Any]]) -> bool:
        """Check if row matches the WHERE condition"""
        if not condition:
            return True
        actual_value = row.get_value(condition['column_index'])
        return actual_value.compare(condition['value'], condition['operator'])

    def _group_rows(self, rows: List[Row], group_indices: List[int]) -> List[Row]:
        seen = set()
        grouped = []
        for row in rows:
            key = tuple(row.get_value(i).sort_key() for i in group_indices)
            if key in seen:
                continue
            seen.add(key)
            grouped.append(row)
        return grouped
