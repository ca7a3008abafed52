"""
Schema Module - Table and database metadata definitions
Defines the in-memory representation of the read-only dataset.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..types.value import Type, infer_type


class CatalogError(Exception):
    """Dataset does not satisfy the schema invariants"""
    pass


@dataclass
class TableSchema:
    """A table: ordered column names plus positionally aligned rows"""
    name: str
    columns: List[str]
    rows: List[List[Any]] = field(default_factory=list)

    def __post_init__(self):
        """Validate table definition"""
        if len(set(self.columns)) != len(self.columns):
            raise CatalogError(f"Duplicate column name in table '{self.name}'")

        for index, row in enumerate(self.rows):
            if len(row) != len(self.columns):
                raise CatalogError(
                    f"Row {index} of table '{self.name}' has {len(row)} values, "
                    f"expected {len(self.columns)}")

    def get_column_index(self, column_name: str) -> int:
        """Get column index by name, -1 if missing"""
        try:
            return self.columns.index(column_name)
        except ValueError:
            return -1

    def column_type(self, column_name: str) -> Type:
        """
        Infer a column's type from the first data row.

        Tables without rows (or NULL in the first row) report TEXT.
        """
        index = self.get_column_index(column_name)
        if index < 0 or not self.rows:
            return Type.TEXT
        value_type = infer_type(self.rows[0][index])
        return Type.TEXT if value_type == Type.NULL else value_type

    def to_dict(self, include_rows: bool = True) -> Dict[str, Any]:
        result = {'columns': list(self.columns)}
        if include_rows:
            result['data'] = [list(row) for row in self.rows]
        return result


@dataclass
class DatabaseSchema:
    """A database: tables keyed by name, in dataset order"""
    name: str
    tables: Dict[str, TableSchema] = field(default_factory=dict)

    def get_table(self, table_name: str) -> Optional[TableSchema]:
        return self.tables.get(table_name)

    def list_tables(self) -> List[str]:
        return list(self.tables.keys())

    def to_dict(self, include_rows: bool = True) -> Dict[str, Any]:
        return {'tables': {name: table.to_dict(include_rows)
                           for name, table in self.tables.items()}}
