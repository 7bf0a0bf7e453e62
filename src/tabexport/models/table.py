"""Tabular value model: a Polars DataFrame plus optional row labels."""

from __future__ import annotations

import dataclasses
import typing

import polars as pl

TableLike = typing.Union["Table", pl.DataFrame, typing.Mapping[str, typing.Sequence[typing.Any]]]


@dataclasses.dataclass(frozen=True, eq=False)
class Table:
    """An in-memory rectangular dataset with named columns.

    Polars guarantees that all columns share the same length; `row_labels`, when
    given, must hold one label per row.
    """

    frame: pl.DataFrame
    row_labels: list[str] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.frame, pl.DataFrame):
            raise TypeError(f"Table.frame must be a polars DataFrame, got {type(self.frame).__name__}")
        if self.row_labels is not None:
            labels = [str(label) for label in self.row_labels]
            if len(labels) != self.frame.height:
                raise ValueError(
                    f"Got {len(labels)} row labels for a table with {self.frame.height} rows"
                )
            object.__setattr__(self, "row_labels", labels)

    @classmethod
    def from_dict(
        cls,
        columns: typing.Mapping[str, typing.Sequence[typing.Any]],
        row_labels: typing.Sequence[str] | None = None,
    ) -> Table:
        """Build a Table from a mapping of column name to values.

        Raises:
            ValueError: When the columns have different lengths.

        """
        lengths = {name: len(values) for name, values in columns.items()}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"Columns have unequal lengths: {lengths}")
        return cls(pl.DataFrame(dict(columns)), list(row_labels) if row_labels is not None else None)

    @property
    def height(self) -> int:
        return self.frame.height

    @property
    def width(self) -> int:
        return self.frame.width

    @property
    def columns(self) -> list[str]:
        return self.frame.columns

    @property
    def has_row_labels(self) -> bool:
        return self.row_labels is not None

    def label_column_name(self, preferred: str) -> str:
        """Return `preferred`, suffixed with underscores until it is not a column name."""
        name = preferred
        while name in self.frame.columns:
            name = f"{name}_"
        return name

    def with_row_labels_column(self, name: str) -> pl.DataFrame:
        """Return the frame with the row labels prepended as a Utf8 column.

        Rows without labels are numbered from 1, matching how row names default
        in data-frame environments.
        """
        labels = self.row_labels if self.row_labels is not None else [str(i + 1) for i in range(self.height)]
        column = pl.Series(self.label_column_name(name), labels, dtype=pl.Utf8)
        return pl.concat([column.to_frame(), self.frame], how="horizontal")


def as_table(value: TableLike) -> Table:
    """Coerce a Table, a Polars DataFrame or a column mapping into a Table."""
    if isinstance(value, Table):
        return value
    if isinstance(value, pl.DataFrame):
        return Table(value)
    if isinstance(value, typing.Mapping):
        return Table.from_dict(value)
    raise TypeError(f"Cannot export {type(value).__name__} as a table")
