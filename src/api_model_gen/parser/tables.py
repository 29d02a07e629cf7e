"""Table structure discovery for documentation pages.

The documentation renders the same logical table in several ways: header
rows as ``<th>`` cells, as a ``<tr class="header">`` of ``<td>`` cells, or
just as the first row. Data rows may carry ``class="filter"``, live in a
``<tbody>``, or neither.

Each variant is a strategy: a function returning the matching elements, or
``None`` when the variant does not apply. Strategies are tried in order and
the first match wins, so new markup variants only need a new entry.
"""

from typing import Callable, Sequence

from bs4 import Tag

Strategy = Callable[[Tag], list[Tag] | None]


def _non_empty(elements: list[Tag]) -> list[Tag] | None:
    return elements or None


def heading_cells(table: Tag) -> list[Tag] | None:
    return _non_empty(table.select("th"))


def header_row_cells(table: Tag) -> list[Tag] | None:
    row = table.select_one("tr.header")
    if row is None:
        return None
    return _non_empty(row.select("td"))


def first_row_cells(table: Tag) -> list[Tag] | None:
    row = table.select_one("tr")
    if row is None:
        return None
    return _non_empty(row.select("td"))


def filter_rows(table: Tag) -> list[Tag] | None:
    return _non_empty(table.select("tr.filter"))


def body_rows(table: Tag) -> list[Tag] | None:
    return _non_empty(table.select("tbody tr"))


def non_header_rows(table: Tag) -> list[Tag] | None:
    return _non_empty(table.select("tr:not(.header)"))


HEADER_STRATEGIES: tuple[Strategy, ...] = (heading_cells, header_row_cells, first_row_cells)
ROW_STRATEGIES: tuple[Strategy, ...] = (filter_rows, body_rows, non_header_rows)


def first_match(table: Tag, strategies: Sequence[Strategy]) -> list[Tag]:
    """Return the result of the first strategy that matches, or an empty list."""
    for strategy in strategies:
        result = strategy(table)
        if result is not None:
            return result
    return []


def cell_text(cell: Tag) -> str:
    return cell.get_text().strip()


def header_text(cells: Sequence[Tag]) -> str:
    """Join header cells into a single lower-cased string for substring checks."""
    return " ".join(cell_text(c) for c in cells).lower()
