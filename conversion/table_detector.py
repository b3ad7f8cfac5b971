"""
Table detection helpers.

Tables are recognised from plain page text: lines whose cells are separated
by runs of whitespace or tabs. The classifier is injectable so the extractor
can run with a different strategy (or none).
"""

from __future__ import annotations

import re
from typing import Protocol

from .models import Table

CELL_BOUNDARY = re.compile(r"\s{2,}|\t")


class TableClassifier(Protocol):
    def is_table_row(self, line: str) -> bool:
        ...

    def split_cells(self, line: str) -> list[str]:
        ...

    def detect(self, text: str) -> list[Table]:
        ...


class WhitespaceTableClassifier:
    """
    A line is a candidate row when it has at least ``min_runs`` runs of two
    or more whitespace characters, or at least one tab. ``min_rows``
    consecutive candidate rows form one table.
    """

    def __init__(self, min_runs: int = 2, min_rows: int = 2) -> None:
        self.min_runs = min_runs
        self.min_rows = min_rows

    def is_table_row(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped:
            return False
        if "\t" in stripped:
            return True
        return len(re.findall(r"\s{2,}", stripped)) >= self.min_runs

    def split_cells(self, line: str) -> list[str]:
        return [cell.strip() for cell in CELL_BOUNDARY.split(line.strip())]

    def detect(self, text: str) -> list[Table]:
        tables: list[Table] = []
        run: list[str] = []

        for line in text.split("\n"):
            if self.is_table_row(line):
                run.append(line)
                continue
            self._flush(run, tables)
            run = []
        self._flush(run, tables)

        return tables

    def _flush(self, run: list[str], tables: list[Table]) -> None:
        if len(run) >= self.min_rows:
            tables.append(Table.from_texts([self.split_cells(line) for line in run]))


class NullTableClassifier:
    """Classifier that never finds a table."""

    def is_table_row(self, line: str) -> bool:
        return False

    def split_cells(self, line: str) -> list[str]:
        return [line]

    def detect(self, text: str) -> list[Table]:
        return []
