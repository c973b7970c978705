import pytest

from services.pdf.document import (
    BODY_BOTTOM, BODY_TOP, STYLES, TABLE_ROW_HEIGHT, DocumentState, LayoutCursor, ReportDocument,
    TableRow, TextBlock, wrap_text,
)
from services.report_errors import DocumentStateError, ReportCompositionError


def test_lifecycle_moves_through_all_states():
    doc = ReportDocument("Test")
    assert doc.state == DocumentState.CREATED

    cursor = doc.start()
    assert doc.state == DocumentState.POPULATING
    assert cursor == LayoutCursor(page=0, y=BODY_TOP)

    doc.add_block(cursor, TextBlock(["hello"]))
    doc.finalize("footer")
    assert doc.state == DocumentState.FINALIZING

    doc.close()
    assert doc.state == DocumentState.CLOSED


def test_no_transitions_after_close():
    doc = ReportDocument()
    cursor = doc.start()
    doc.finalize("footer")
    doc.close()

    with pytest.raises(DocumentStateError):
        doc.add_block(cursor, TextBlock(["late"]))
    with pytest.raises(DocumentStateError):
        doc.add_page_break(cursor)
    with pytest.raises(DocumentStateError):
        doc.finalize("footer")
    with pytest.raises(DocumentStateError):
        doc.close()


def test_cannot_populate_before_start_or_after_finalize():
    doc = ReportDocument()
    with pytest.raises(DocumentStateError):
        doc.add_block(LayoutCursor(page=0), TextBlock(["x"]))

    cursor = doc.start()
    with pytest.raises(DocumentStateError):
        doc.start()

    doc.finalize("footer")
    with pytest.raises(DocumentStateError):
        doc.add_block(cursor, TextBlock(["x"]))


def test_add_block_returns_new_cursor_and_keeps_old_one():
    doc = ReportDocument()
    cursor = doc.start()
    block = TextBlock(["one", "two"])

    moved = doc.add_block(cursor, block)

    assert cursor.y == BODY_TOP
    assert moved.y == pytest.approx(BODY_TOP + block.height)
    assert moved.page == 0


def test_block_that_does_not_fit_moves_to_next_page():
    doc = ReportDocument()
    cursor = doc.start()
    cursor = LayoutCursor(page=cursor.page, y=BODY_BOTTOM - 3)

    cursor = doc.add_block(cursor, TextBlock(["too tall", "for the space left"]))

    assert doc.page_count == 2
    assert cursor.page == 1
    assert [number for number, _ in doc.iter_blocks()] == [2]


def test_long_paragraph_flows_across_pages_without_losing_lines():
    doc = ReportDocument()
    cursor = doc.start()
    text = "\n".join(f"Activity line number {i}" for i in range(120))

    doc.add_paragraph(cursor, text)

    placed = [line for _, block in doc.iter_blocks() for line in block.lines]
    assert placed == wrap_text(text)
    assert doc.page_count >= 2


def test_finalize_stamps_every_page():
    doc = ReportDocument()
    cursor = doc.start()
    for _ in range(3):
        cursor = doc.add_page_break(cursor)

    pages = doc.finalize("Nepal Central High School - Pre-Primary Student Record System")

    assert len(pages) == 4
    for i, page in enumerate(pages, start=1):
        assert page.footer[0] == f"Page {i} of 4"
        assert page.footer[1] == "Nepal Central High School - Pre-Primary Student Record System"


def test_wrap_text_respects_width():
    lines = wrap_text("word " * 200, "body", width=50)
    assert len(lines) > 1
    assert all(len(line) <= 28 for line in lines)


def test_block_taller_than_page_body_is_rejected():
    doc = ReportDocument()
    cursor = doc.start()

    with pytest.raises(ReportCompositionError):
        doc.add_block(cursor, TextBlock([f"line {i}" for i in range(60)]))


def test_table_row_split_repeats_date_and_keeps_every_comment_line():
    row = TableRow.of(["5/1/2024", "Good", "Good", "Good", "Good", "Good"], "Loves painting. " * 100)

    head, tail = row.split(TABLE_ROW_HEIGHT + 3 * STYLES["small"].line_height)

    assert head.cells == row.cells
    assert len(head.note_lines) == 3
    assert tail.cells == ["5/1/2024 (cont.)", "", "", "", "", ""]
    assert head.note_lines + tail.note_lines == row.note_lines


def test_table_row_split_without_room_for_a_comment_line():
    row = TableRow.of(["5/1/2024", "Good"], "Short note")

    head, tail = row.split(TABLE_ROW_HEIGHT + 1)

    assert head is None
    assert tail is row
