"""Tests for Column, RowView and QvdDocument accessors."""

import pytest

from qvd.core.document import Column, QvdDocument, RowView
from qvd.core.models import Symbol
from qvd.core.reader import read_qvd


def _column() -> Column:
    symbols = [Symbol.string("Q1"), Symbol.string("Q2"), Symbol.dual_integer(3, "03")]
    return Column.from_indexes("Quarter", symbols, [0, 0, 1, 2, 1])


@pytest.mark.unit
def test_column_resolves_cells_through_indexes():
    column = _column()

    assert len(column) == 5
    assert column.values() == ["Q1", "Q1", "Q2", 3, "Q2"]
    assert column.texts() == ["Q1", "Q1", "Q2", "03", "Q2"]
    assert column[3] == 3
    assert column.cell(3) == Symbol.dual_integer(3, "03")
    assert column.cell(0) is column.symbols[0]
    assert repr(column) == "Column(name='Quarter', rows=5, symbols=3)"


@pytest.mark.unit
def test_column_is_immutable():
    column = _column()
    with pytest.raises(AttributeError):
        column.name = "Other"  # type: ignore[misc]


@pytest.mark.unit
def test_row_view_is_lazy_and_restartable(quarters_qvd):
    doc = read_qvd(quarters_qvd)
    rows = doc.rows()

    assert isinstance(rows, RowView)
    assert len(rows) == 12
    assert list(rows) == list(rows)
    assert next(iter(rows)) == (1, "Q1")


@pytest.mark.unit
def test_row_view_indexing(quarters_qvd):
    rows = read_qvd(quarters_qvd).rows()

    assert rows[0] == (1, "Q1")
    assert rows[-1] == (12, "Q4")
    assert rows[2:4] == [(3, "Q1"), (4, "Q2")]
    with pytest.raises(IndexError):
        rows[12]


@pytest.mark.unit
def test_text_rows(quarters_qvd):
    doc = read_qvd(quarters_qvd)
    assert doc.text_rows()[0] == ("1", "Q1")


@pytest.mark.unit
def test_document_accessors(quarters_qvd):
    doc = read_qvd(quarters_qvd)

    assert doc.columns() is doc.columns()
    assert doc.field_names == ["Month", "Quarter"]
    assert len(doc) == doc.record_count == 12
    assert doc.column("Month").values()[:3] == [1, 2, 3]
    assert "Calendar" in repr(doc)
    with pytest.raises(KeyError):
        doc.column("Year")


@pytest.mark.unit
def test_document_equality_and_hash(quarters_qvd, minimal_qvd):
    first = read_qvd(quarters_qvd)
    second = read_qvd(quarters_qvd)
    other = read_qvd(minimal_qvd)

    assert first == second
    assert hash(first) == hash(second)
    assert first != other
    assert first != "not a document"


@pytest.mark.unit
def test_document_without_columns(minimal_qvd):
    source = read_qvd(minimal_qvd)
    doc = QvdDocument(source.header, [])

    assert doc.columns() == ()
    assert list(doc.rows()) == [(), (), ()]
