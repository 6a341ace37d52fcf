"""
Generic table engine: sort, filter, column visibility, selection, paging.

The engine works on any homogeneous row collection (LogRecord objects,
plain dicts, ...). It is parameterized by a list of Columns and a row id
accessor.

Pipeline for every read:
    working rows -> filter -> stable sort -> page

Row ids MUST be unique within one engine; selection is keyed by id.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import (Any, Callable, Dict, FrozenSet, Iterable, List, Mapping,
                    Optional, Sequence, Union)

from ..exceptions import DuplicateRowId, RecordNotFound, ValidationError
from .columns import Column, ColumnKind, SortDirection, field_getter

logger = logging.getLogger(__name__)

DELETE_ACTION = "delete"

RowPredicate = Callable[[Any], bool]
RowAction = Callable[[Any], Any]


@dataclass(frozen=True)
class TableViewState:
    """Snapshot of the engine's transient view state."""
    sort_column: Optional[str] = None
    sort_direction: SortDirection = SortDirection.NONE
    filter_column: Optional[str] = None
    filter_value: Any = None
    column_visibility: Mapping[str, bool] = field(default_factory=dict)
    selected_row_ids: FrozenSet[Any] = frozenset()
    page_index: int = 0
    page_size: Optional[int] = None


class TableEngine:
    """
    Sortable, filterable, selectable view over a row collection.

    Args:
        rows: the records to browse
        columns: column schema, ids must be unique
        default_column: starts the view sorted ascending on this column and
            is the column `set_filter` uses when none is given
        row_id: row -> id accessor, defaults to reading `id`
        page_size: rows per page, None for a single page
        actions: name -> callback(row_id); see run_action()
    """

    def __init__(self,
                 rows: Iterable[Any],
                 columns: Sequence[Column],
                 default_column: Optional[str] = None,
                 row_id: Optional[Callable[[Any], Any]] = None,
                 page_size: Optional[int] = None,
                 actions: Optional[Mapping[str, RowAction]] = None):
        self.columns: List[Column] = list(columns)
        self._columns: Dict[str, Column] = {}
        for column in self.columns:
            if column.id in self._columns:
                raise ValidationError(f"Duplicate column id {column.id!r}")
            self._columns[column.id] = column

        if default_column is not None and default_column not in self._columns:
            raise ValidationError(f"Unknown default column {default_column!r}")
        if page_size is not None and page_size <= 0:
            raise ValidationError(f"page_size must be > 0, got {page_size}")

        self.default_column = default_column
        self.page_size = page_size
        self._row_id = row_id or field_getter("id")
        self._actions: Dict[str, RowAction] = dict(actions or {})

        self._rows: List[Any] = []
        self._index: Dict[Any, int] = {}
        self._load(rows)
        self._reset_state()

    # ROW COLLECTION
    def _load(self, rows: Iterable[Any]) -> None:
        rows = list(rows)
        index: Dict[Any, int] = {}
        for position, row in enumerate(rows):
            rid = self._row_id(row)
            if rid in index:
                raise DuplicateRowId(rid)
            index[rid] = position
        self._rows = rows
        self._index = index

    def replace_rows(self, rows: Iterable[Any]) -> None:
        """Swap in a new collection; all view state is reset."""
        self._load(rows)
        self._reset_state()
        logger.debug("Table rows replaced (%d rows)", len(self._rows))

    def _reset_state(self) -> None:
        self._sort_column: Optional[str] = None
        self._sort_direction = SortDirection.NONE
        if self.default_column is not None and self._columns[self.default_column].sortable:
            self._sort_column = self.default_column
            self._sort_direction = SortDirection.ASC

        self._filter_column: Optional[str] = self.default_column
        self._filter_value: Any = None
        self._visibility: Dict[str, bool] = {c.id: True for c in self.columns}
        self._selected: set = set()
        self._page_index = 0

    def __len__(self) -> int:
        return len(self._rows)

    def row_ids(self) -> List[Any]:
        return [self._row_id(row) for row in self._rows]

    def get_row(self, row_id: Any) -> Any:
        try:
            return self._rows[self._index[row_id]]
        except KeyError:
            raise RecordNotFound(f"No row with id {row_id!r}") from None

    def column(self, column_id: str) -> Column:
        try:
            return self._columns[column_id]
        except KeyError:
            raise ValidationError(f"Unknown column {column_id!r}") from None

    # SORT
    def set_sort(self, column_id: str, direction: Union[SortDirection, str, None] = None) -> SortDirection:
        """
        Sort on `column_id`.

        Without `direction` this is a column activation: the same column
        cycles none -> asc -> desc -> none, a different column starts at asc.
        Returns the new direction.
        """
        column = self.column(column_id)
        if not column.sortable:
            raise ValidationError(f"Column {column_id!r} is not sortable")

        if direction is not None:
            new_direction = SortDirection(direction)
        elif column_id == self._sort_column:
            new_direction = self._sort_direction.next()
        else:
            new_direction = SortDirection.ASC

        self._sort_column = column_id
        self._sort_direction = new_direction
        self._page_index = 0
        logger.debug("Sort set to %s %s", column_id, new_direction.value)
        return new_direction

    def clear_sort(self) -> None:
        self._sort_column = None
        self._sort_direction = SortDirection.NONE
        self._page_index = 0

    def _sorted(self, rows: List[Any]) -> List[Any]:
        if self._sort_column is None or self._sort_direction is SortDirection.NONE:
            return rows

        column = self._columns[self._sort_column]
        present = []
        missing = []
        for row in rows:
            (missing if column.value(row) is None else present).append(row)

        if column.kind is ColumnKind.STRING:
            key = lambda row: str(column.value(row))
        else:
            key = column.value

        # sorted() is stable in both directions; rows without a value go last
        ordered = sorted(present, key=key, reverse=self._sort_direction is SortDirection.DESC)
        return ordered + missing

    # FILTER
    def set_filter(self, value: Any, column_id: Optional[str] = None) -> None:
        """
        Filter rows on one column.

        String columns match by case-sensitive substring, number and enum
        columns by exact value. None or "" clears the filter. A callable is
        used as the row predicate itself.
        """
        self._page_index = 0

        if value is None or (isinstance(value, str) and value == ""):
            self._filter_value = None
            logger.debug("Filter cleared")
            return

        if callable(value):
            self._filter_value = value
            logger.debug("Filter set to custom predicate")
            return

        target = column_id if column_id is not None else self._filter_column
        if target is None:
            raise ValidationError("No filter column given and the table has no default column")
        self.column(target)
        self._filter_column = target
        self._filter_value = value
        logger.debug("Filter set on %s: %r", target, value)

    def clear_filter(self) -> None:
        self.set_filter(None)

    def _passes(self, row: Any) -> bool:
        value = self._filter_value
        if value is None:
            return True
        if callable(value):
            return bool(value(row))
        return self._columns[self._filter_column].matches(row, value)

    def _filtered(self) -> List[Any]:
        return [row for row in self._rows if self._passes(row)]

    # READ
    def get_rows(self) -> List[Any]:
        """All rows passing the filter, in sort order (every page)."""
        return self._sorted(self._filtered())

    def get_visible_rows(self) -> List[Any]:
        """Rows of the current page."""
        rows = self.get_rows()
        if self.page_size is None:
            return rows
        start = self._page_index * self.page_size
        return rows[start:start + self.page_size]

    # PAGINATION
    @property
    def page_index(self) -> int:
        return self._page_index

    def page_count(self) -> int:
        if self.page_size is None:
            return 1
        return max(1, math.ceil(len(self._filtered()) / self.page_size))

    def set_page(self, index: int) -> int:
        """Move to page `index`, clamped to the valid range. Returns the page."""
        self._page_index = min(max(index, 0), self.page_count() - 1)
        return self._page_index

    def next_page(self) -> int:
        return self.set_page(self._page_index + 1)

    def previous_page(self) -> int:
        return self.set_page(self._page_index - 1)

    # COLUMN VISIBILITY
    def toggle_column(self, column_id: str, visible: Optional[bool] = None) -> bool:
        """Show/hide a column. Rendering only; sort and filter still see it."""
        column = self.column(column_id)
        new_value = (not self._visibility[column_id]) if visible is None else bool(visible)
        if not new_value and not column.hideable:
            raise ValidationError(f"Column {column_id!r} cannot be hidden")
        self._visibility[column_id] = new_value
        return new_value

    def is_column_visible(self, column_id: str) -> bool:
        self.column(column_id)
        return self._visibility[column_id]

    def visible_columns(self) -> List[Column]:
        return [c for c in self.columns if self._visibility[c.id]]

    # SELECTION
    def toggle_select(self, row_id: Any, selected: Optional[bool] = None) -> bool:
        if row_id not in self._index:
            raise RecordNotFound(f"No row with id {row_id!r}")
        new_value = (row_id not in self._selected) if selected is None else bool(selected)
        if new_value:
            self._selected.add(row_id)
        else:
            self._selected.discard(row_id)
        return new_value

    def select_all(self, selected: bool = True) -> None:
        """(De)select every row that passes the current filter, on all pages."""
        ids = [self._row_id(row) for row in self._filtered()]
        if selected:
            self._selected.update(ids)
        else:
            self._selected.difference_update(ids)

    def select_page(self, selected: bool = True) -> None:
        ids = [self._row_id(row) for row in self.get_visible_rows()]
        if selected:
            self._selected.update(ids)
        else:
            self._selected.difference_update(ids)

    def is_all_selected(self) -> bool:
        rows = self._filtered()
        return bool(rows) and all(self._row_id(row) in self._selected for row in rows)

    def clear_selection(self) -> None:
        self._selected.clear()

    def get_selected_ids(self) -> List[Any]:
        """Selected ids in collection order."""
        return [rid for rid in self.row_ids() if rid in self._selected]

    def get_selected_rows(self) -> List[Any]:
        return [row for row in self._rows if self._row_id(row) in self._selected]

    # RENDERING
    def render_row(self, row: Any) -> Dict[str, Any]:
        return {c.id: c.display(row) for c in self.visible_columns()}

    def render_page(self) -> List[Dict[str, Any]]:
        return [self.render_row(row) for row in self.get_visible_rows()]

    # ROW ACTIONS
    @property
    def actions(self) -> List[str]:
        return list(self._actions)

    def run_action(self, name: str, row_id: Any) -> Any:
        """
        Invoke the caller's callback for `name` with `row_id`.

        For the delete action a truthy return value confirms the deletion and
        the row leaves the working view. Storage is the caller's business.
        """
        try:
            callback = self._actions[name]
        except KeyError:
            raise ValidationError(f"Unknown row action {name!r}") from None
        self.get_row(row_id)

        result = callback(row_id)
        if name == DELETE_ACTION and result:
            self.remove_row(row_id)
        return result

    def remove_row(self, row_id: Any) -> None:
        """Drop a row from the working view (not from storage)."""
        row = self.get_row(row_id)
        self._rows = [r for r in self._rows if r is not row]
        self._index = {self._row_id(r): i for i, r in enumerate(self._rows)}
        self._selected.discard(row_id)
        self.set_page(self._page_index)
        logger.debug("Row %r removed from view", row_id)

    # STATE
    @property
    def view_state(self) -> TableViewState:
        filter_value = self._filter_value
        return TableViewState(
            sort_column=self._sort_column,
            sort_direction=self._sort_direction,
            filter_column=None if callable(filter_value) else self._filter_column,
            filter_value=filter_value,
            column_visibility=dict(self._visibility),
            selected_row_ids=frozenset(self._selected),
            page_index=self._page_index,
            page_size=self.page_size,
        )
