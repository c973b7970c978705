# services/pdf/document.py
"""
보고서 문서 모델 (페이지/블록 배치 정보)

- 실제 PDF 변환 전 단계: 블록을 A4 좌표(mm)에 배치하고 페이지를 나눈다
- 배치 위치는 LayoutCursor로 명시적으로 주고받는다 (전역 y 좌표 없음)
- 수명주기: CREATED → POPULATING → FINALIZING(페이지 번호 부여) → CLOSED
"""

import textwrap
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from services.report_errors import DocumentStateError, ReportCompositionError

# ==========================================================
# [A4 레이아웃 상수] 단위: mm
# ==========================================================
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN_LEFT = 20.0
CONTENT_WIDTH = 170.0
BODY_TOP = 20.0
BODY_BOTTOM = 270.0
FOOTER_TOP = 278.0

PT_TO_MM = 0.3528
AVG_CHAR_WIDTH = 0.5      # 글자 폭 ≈ 글꼴 크기의 절반 (Helvetica 기준 근사치)
BLOCK_GAP = 2.0

PHOTO_SIZE = 30.0
PHOTO_COLUMN = 40.0       # 사진 폭 + 여백
TABLE_HEADER_HEIGHT = 8.0
TABLE_ROW_HEIGHT = 7.0


@dataclass(frozen=True)
class TextStyle:
    font_size: float      # pt
    line_height: float    # mm


STYLES = {
    "school": TextStyle(18, 9),
    "subtitle": TextStyle(12, 7),
    "muted": TextStyle(10, 6),
    "title": TextStyle(14, 9),
    "filters": TextStyle(10, 6),
    "heading": TextStyle(12, 10),
    "subheading": TextStyle(11, 7),
    "body": TextStyle(10, 5),
    "small": TextStyle(8, 4.5),
    "notice": TextStyle(10, 8),
}


def wrap_text(text: str, style: str = "body", width: float = CONTENT_WIDTH) -> List[str]:
    """폭(mm)에 맞게 줄바꿈. 빈 줄은 유지한다."""
    chars = max(1, int(width / (STYLES[style].font_size * PT_TO_MM * AVG_CHAR_WIDTH)))
    lines = []
    for paragraph in (text or "").splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, chars) or [""])
    return lines


# ==========================================================
# [블록 타입]
# ==========================================================

@dataclass
class TextBlock:
    lines: List[str]
    style: str = "body"
    kind: str = field(default="text", init=False)

    @classmethod
    def wrapped(cls, text: str, style: str = "body") -> "TextBlock":
        return cls(wrap_text(text, style), style)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def height(self) -> float:
        return len(self.lines) * STYLES[self.style].line_height + BLOCK_GAP


@dataclass
class ProfileBlock:
    """학생/계획 기본 정보 (왼쪽 사진 + 오른쪽 항목 목록)"""
    lines: List[str]
    photo: Optional[object] = None     # services.photo_fetcher.Photo
    kind: str = field(default="profile", init=False)

    @property
    def height(self) -> float:
        text_height = len(self.lines) * STYLES["muted"].line_height
        photo_height = PHOTO_SIZE if self.photo is not None else 0.0
        return max(text_height, photo_height) + BLOCK_GAP * 2


@dataclass
class TableRow:
    cells: List[str]
    note: Optional[str] = None
    note_lines: List[str] = field(default_factory=list)

    @classmethod
    def of(cls, cells: Sequence[str], note: Optional[str] = None) -> "TableRow":
        note = note.strip() if note else None
        note_lines = wrap_text(f"Comment: {note}", "small") if note else []
        return cls(list(cells), note, note_lines)

    @property
    def height(self) -> float:
        return TABLE_ROW_HEIGHT + len(self.note_lines) * STYLES["small"].line_height

    @property
    def min_height(self) -> float:
        """쪼갤 수 있는 가장 작은 단위 (셀 + 코멘트 첫 줄)"""
        return TABLE_ROW_HEIGHT + min(len(self.note_lines), 1) * STYLES["small"].line_height

    def split(self, room: float) -> Tuple[Optional["TableRow"], "TableRow"]:
        """room(mm)에 들어가는 만큼 코멘트 줄을 앞 행에 남기고 나머지는 날짜만 반복한 이어지는 행으로"""
        fit = int((room - TABLE_ROW_HEIGHT) // STYLES["small"].line_height)
        if fit <= 0 or not self.note_lines:
            return None, self
        head = TableRow(self.cells, self.note, self.note_lines[:fit])
        tail_cells = [f"{self.cells[0]} (cont.)"] + [""] * (len(self.cells) - 1)
        tail = TableRow(tail_cells, self.note, self.note_lines[fit:])
        return head, tail


# 한 페이지 본문에 표 헤더를 두고 행을 놓을 수 있는 최대 높이
TABLE_PAGE_ROOM = BODY_BOTTOM - BODY_TOP - TABLE_HEADER_HEIGHT - BLOCK_GAP


@dataclass
class TableBlock:
    columns: List[str]
    rows: List[TableRow]
    continued: bool = False            # 이전 페이지에서 이어지는 표 (헤더 반복)
    kind: str = field(default="table", init=False)

    @property
    def height(self) -> float:
        return TABLE_HEADER_HEIGHT + sum(r.height for r in self.rows) + BLOCK_GAP


@dataclass
class RuleBlock:
    kind: str = field(default="rule", init=False)

    @property
    def height(self) -> float:
        return 4.0


@dataclass
class PlacedBlock:
    y: float
    block: object
    region: str = "body"               # "header" | "body"


@dataclass
class Page:
    number: int
    items: List[PlacedBlock] = field(default_factory=list)
    footer: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutCursor:
    page: int                          # 0부터 시작하는 페이지 인덱스
    y: float = BODY_TOP


class DocumentState(str, Enum):
    CREATED = "created"
    POPULATING = "populating"
    FINALIZING = "finalizing"
    CLOSED = "closed"


class ReportDocument:
    def __init__(self, title: str = ""):
        self.title = title
        self.state = DocumentState.CREATED
        self.pages: List[Page] = []

    # ------------------------------------------------------
    # 상태 확인
    # ------------------------------------------------------
    def _require(self, *states: DocumentState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise DocumentStateError(f"문서 상태 오류: 현재={self.state.value}, 허용={allowed}")

    def _check_cursor(self, cursor: LayoutCursor) -> None:
        if not 0 <= cursor.page < len(self.pages):
            raise DocumentStateError(f"존재하지 않는 페이지 커서: {cursor}")

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def remaining(self, cursor: LayoutCursor) -> float:
        return BODY_BOTTOM - cursor.y

    @staticmethod
    def at_page_top(cursor: LayoutCursor) -> bool:
        return cursor.y <= BODY_TOP

    # ------------------------------------------------------
    # CREATED → POPULATING
    # ------------------------------------------------------
    def start(self) -> LayoutCursor:
        self._require(DocumentState.CREATED)
        self.pages.append(Page(number=1))
        self.state = DocumentState.POPULATING
        return LayoutCursor(page=0)

    # ------------------------------------------------------
    # POPULATING (반복 가능)
    # ------------------------------------------------------
    def _place(self, cursor: LayoutCursor, block, region: str) -> LayoutCursor:
        self._require(DocumentState.POPULATING)
        self._check_cursor(cursor)
        if block.height > self.remaining(cursor) and not self.at_page_top(cursor):
            cursor = self.add_page_break(cursor)
        if cursor.y + block.height > BODY_BOTTOM + 1e-6:
            # 잘린 채로 출력되는 문서 대신 생성 실패
            raise ReportCompositionError(
                f"블록이 페이지 본문을 넘음: kind={block.kind}, height={block.height:.1f}mm"
            )
        self.pages[cursor.page].items.append(PlacedBlock(cursor.y, block, region))
        return replace(cursor, y=cursor.y + block.height)

    def add_header(self, cursor: LayoutCursor, blocks: Sequence) -> LayoutCursor:
        for block in blocks:
            cursor = self._place(cursor, block, "header")
        return cursor

    def add_block(self, cursor: LayoutCursor, block) -> LayoutCursor:
        return self._place(cursor, block, "body")

    def add_paragraph(self, cursor: LayoutCursor, text: str, style: str = "body") -> LayoutCursor:
        """긴 본문은 줄 단위로 나눠 여러 페이지에 이어서 배치"""
        lines = wrap_text(text, style)
        line_height = STYLES[style].line_height
        while lines:
            fit = int((self.remaining(cursor) - BLOCK_GAP) // line_height)
            if fit <= 0:
                if self.at_page_top(cursor):
                    fit = 1
                else:
                    cursor = self.add_page_break(cursor)
                    continue
            chunk, lines = lines[:fit], lines[fit:]
            cursor = self.add_block(cursor, TextBlock(chunk, style))
            if lines:
                cursor = self.add_page_break(cursor)
        return cursor

    def add_page_break(self, cursor: LayoutCursor) -> LayoutCursor:
        self._require(DocumentState.POPULATING)
        self._check_cursor(cursor)
        if cursor.page == len(self.pages) - 1:
            self.pages.append(Page(number=len(self.pages) + 1))
        return LayoutCursor(page=cursor.page + 1)

    # ------------------------------------------------------
    # POPULATING → FINALIZING: 모든 페이지에 "Page i of N" + 푸터 문구
    # ------------------------------------------------------
    def finalize(self, footer_line: str) -> List[Page]:
        self._require(DocumentState.POPULATING)
        self.state = DocumentState.FINALIZING
        total = len(self.pages)
        for page in self.pages:
            page.footer = [f"Page {page.number} of {total}", footer_line]
        return self.pages

    # ------------------------------------------------------
    # FINALIZING → CLOSED
    # ------------------------------------------------------
    def close(self) -> None:
        self._require(DocumentState.FINALIZING)
        self.state = DocumentState.CLOSED

    # ------------------------------------------------------
    # 조회 도우미
    # ------------------------------------------------------
    def iter_blocks(self, region: Optional[str] = None) -> Iterator[Tuple[int, object]]:
        """(페이지 번호, 블록) 순회"""
        for page in self.pages:
            for item in page.items:
                if region is None or item.region == region:
                    yield page.number, item.block
