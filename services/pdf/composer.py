# services/pdf/composer.py
"""
보고서 레이아웃 구성

- compose_student_report: 학생별 기본 정보 + 진도 기록 표 (최신순)
- compose_teaching_plan_report: 계획별 기본 정보 + 설명/활동/목표
- 두 번째 학생/계획부터는 새 페이지에서 시작
- 결과 문서는 POPULATING 상태로 반환 (페이지 번호는 PDFService에서 finalize)
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from config.settings import settings
from schemas.progress import ProgressEntry
from schemas.students import Student
from schemas.teaching_plans import TeachingPlan
from services.pdf.document import (
    BLOCK_GAP, LayoutCursor, ProfileBlock, ReportDocument, RuleBlock, STYLES,
    TABLE_HEADER_HEIGHT, TABLE_PAGE_ROOM, TableBlock, TableRow, TextBlock,
)
from services.report_errors import ReportCompositionError

STUDENT_REPORT_TITLE = "Student Progress Report"
PLAN_REPORT_TITLE = "Teaching Plans Report"

NO_STUDENTS_NOTICE = "No students found matching the criteria."
NO_PLANS_NOTICE = "No teaching plans found matching the criteria."
NO_PROGRESS_NOTICE = "No progress entries recorded."

PROGRESS_COLUMNS = ["Date", "Social Skills", "Pre-Literacy", "Pre-Numeracy", "Motor Skills", "Emotional Dev."]

NURSERY = "Nursery"


@dataclass(frozen=True)
class SchoolInfo:
    name: str
    address: str
    system_name: str

    @classmethod
    def from_settings(cls) -> "SchoolInfo":
        return cls(settings.SCHOOL_NAME, settings.SCHOOL_ADDRESS, settings.SYSTEM_NAME)


# ==========================================================
# [값 포맷]
# ==========================================================

def to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise ReportCompositionError(f"잘못된 날짜 형식: {value!r}") from e
    raise ReportCompositionError(f"잘못된 날짜 값: {value!r}")


def format_date(value) -> str:
    d = to_date(value)
    return f"{d.month}/{d.day}/{d.year}"


def label(value, default: str = "N/A") -> str:
    if value is None or value == "":
        return default
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# ==========================================================
# [공통 헤더]
# ==========================================================

def add_report_header(doc: ReportDocument, cursor: LayoutCursor, school: SchoolInfo,
                      title: str, filters: str, generated_on: date) -> LayoutCursor:
    return doc.add_header(cursor, [
        TextBlock([school.name], "school"),
        TextBlock([school.system_name], "subtitle"),
        TextBlock([school.address], "muted"),
        TextBlock([f"Generated on: {generated_on:%B} {generated_on.day}, {generated_on.year}"], "muted"),
        RuleBlock(),
        TextBlock([title], "title"),
        TextBlock.wrapped(filters, "filters"),
    ])


def _keep_with_next(doc: ReportDocument, cursor: LayoutCursor, height: float) -> LayoutCursor:
    # 소제목이 페이지 끝에 혼자 남지 않도록
    if doc.remaining(cursor) < height and not doc.at_page_top(cursor):
        return doc.add_page_break(cursor)
    return cursor


def add_table(doc: ReportDocument, cursor: LayoutCursor, columns: Sequence[str],
              rows: List[TableRow]) -> LayoutCursor:
    """페이지를 넘기면 헤더를 반복하며 표를 이어서 배치

    한 페이지에 다 들어가지 않는 행(긴 코멘트)은 코멘트 줄 단위로 나눠 다음 페이지에 이어 쓴다.
    """
    pending = list(rows)
    continued = False
    while pending:
        room = doc.remaining(cursor) - TABLE_HEADER_HEIGHT - BLOCK_GAP
        chunk, used = [], 0.0
        while pending:
            row = pending[0]
            if used + row.height <= room:
                chunk.append(row)
                used += row.height
                pending.pop(0)
                continue
            if row.height > TABLE_PAGE_ROOM:
                head, tail = row.split(room - used)
                if head is not None:
                    chunk.append(head)
                    pending[0] = tail
            break
        if not chunk:
            cursor = doc.add_page_break(cursor)
            continue
        cursor = doc.add_block(cursor, TableBlock(list(columns), chunk, continued))
        continued = True
        if pending:
            cursor = doc.add_page_break(cursor)
    return cursor


# ==========================================================
# [학생 진도 보고서]
# ==========================================================

def student_profile_lines(student: Student, teacher_name: Optional[str] = None) -> List[str]:
    class_name = label(student.class_name)
    lines = [
        f"Class: {class_name}",
        f"Age: {student.age} years",
        f"Learning Ability: {label(student.learning_ability)}",
    ]
    # Nursery 반은 쓰기 속도 항목 자체를 출력하지 않음
    if class_name != NURSERY:
        lines.append(f"Writing Speed: {label(student.writing_speed)}")
    if teacher_name:
        lines.append(f"Teacher: {teacher_name}")
    if student.parent_contact:
        lines.append(f"Parent Contact: {student.parent_contact}")
    return lines


def progress_rows(entries: Sequence[ProgressEntry]) -> List[TableRow]:
    dated = [(to_date(e.date), e) for e in entries]
    dated.sort(key=lambda pair: (pair[0], pair[1].id), reverse=True)
    return [
        TableRow.of(
            [
                format_date(d),
                label(e.social_skills),
                label(e.pre_literacy),
                label(e.pre_numeracy),
                label(e.motor_skills),
                label(e.emotional_development),
            ],
            note=e.comments,
        )
        for d, e in dated
    ]


def add_student_section(doc: ReportDocument, cursor: LayoutCursor, student: Student,
                        entries: Sequence[ProgressEntry], photo=None,
                        teacher_name: Optional[str] = None) -> LayoutCursor:
    rows = progress_rows(entries)

    cursor = doc.add_block(cursor, TextBlock.wrapped(f"Student: {student.name}", "heading"))
    cursor = doc.add_block(cursor, ProfileBlock(student_profile_lines(student, teacher_name), photo))

    if not rows:
        return doc.add_block(cursor, TextBlock([NO_PROGRESS_NOTICE], "notice"))

    subheading = TextBlock(["Progress History"], "subheading")
    cursor = _keep_with_next(doc, cursor, subheading.height + TABLE_HEADER_HEIGHT + BLOCK_GAP + rows[0].min_height)
    cursor = doc.add_block(cursor, subheading)
    return add_table(doc, cursor, PROGRESS_COLUMNS, rows)


def student_filter_line(class_name=None, start_date=None, end_date=None) -> str:
    parts = [f"Class: {label(class_name, 'All Classes')}"]
    if start_date and end_date:
        parts.append(f"Period: {format_date(start_date)} to {format_date(end_date)}")
    elif start_date:
        parts.append(f"Period: from {format_date(start_date)}")
    elif end_date:
        parts.append(f"Period: until {format_date(end_date)}")
    return " | ".join(parts)


def compose_student_report(students: Sequence[Student],
                           progress_by_student: Mapping[int, Sequence[ProgressEntry]],
                           photos: Optional[Mapping[int, object]] = None, *,
                           class_name=None, start_date=None, end_date=None,
                           teacher_names: Optional[Dict[int, str]] = None,
                           generated_on: Optional[date] = None,
                           school: Optional[SchoolInfo] = None) -> ReportDocument:
    photos = photos or {}
    teacher_names = teacher_names or {}
    doc = ReportDocument(STUDENT_REPORT_TITLE)
    cursor = doc.start()
    cursor = add_report_header(doc, cursor, school or SchoolInfo.from_settings(), STUDENT_REPORT_TITLE,
                               student_filter_line(class_name, start_date, end_date),
                               generated_on or date.today())

    if not students:
        doc.add_block(cursor, TextBlock([NO_STUDENTS_NOTICE], "notice"))
        return doc

    for i, student in enumerate(students):
        if i > 0:
            cursor = doc.add_page_break(cursor)
        cursor = add_student_section(
            doc, cursor, student,
            progress_by_student.get(student.id, []),
            photo=photos.get(student.id),
            teacher_name=teacher_names.get(student.teacher_id),
        )
    return doc


# ==========================================================
# [교육 계획 보고서]
# ==========================================================

PLAN_SECTIONS = (("Description", "description"), ("Activities", "activities"), ("Goals", "goals"))


def add_plan_section(doc: ReportDocument, cursor: LayoutCursor, plan: TeachingPlan,
                     teacher_name: str) -> LayoutCursor:
    plan_type = label(plan.type)
    cursor = doc.add_block(cursor, TextBlock.wrapped(f"{plan_type} Plan: {plan.title}", "heading"))
    cursor = doc.add_block(cursor, ProfileBlock([
        f"Type: {plan_type}",
        f"Class: {label(plan.class_name)}",
        f"Teacher: {teacher_name}",
        f"Period: {format_date(plan.start_date)} to {format_date(plan.end_date)}",
    ]))

    for title, attr in PLAN_SECTIONS:
        subheading = TextBlock([f"{title}:"], "subheading")
        cursor = _keep_with_next(doc, cursor, subheading.height + STYLES["body"].line_height * 2)
        cursor = doc.add_block(cursor, subheading)
        cursor = doc.add_paragraph(cursor, getattr(plan, attr) or "", "body")
    return cursor


def plan_filter_line(plan_type=None, class_name=None, start_date=None, end_date=None) -> str:
    parts = [f"Type: {label(plan_type, 'All Types')}", f"Class: {label(class_name, 'All Classes')}"]
    if start_date and end_date:
        parts.append(f"Period: {format_date(start_date)} to {format_date(end_date)}")
    return " | ".join(parts)


def compose_teaching_plan_report(plans: Sequence[TeachingPlan],
                                 teacher_names: Optional[Mapping[int, str]] = None, *,
                                 plan_type=None, class_name=None, start_date=None, end_date=None,
                                 generated_on: Optional[date] = None,
                                 school: Optional[SchoolInfo] = None) -> ReportDocument:
    teacher_names = teacher_names or {}
    doc = ReportDocument(PLAN_REPORT_TITLE)
    cursor = doc.start()
    cursor = add_report_header(doc, cursor, school or SchoolInfo.from_settings(), PLAN_REPORT_TITLE,
                               plan_filter_line(plan_type, class_name, start_date, end_date),
                               generated_on or date.today())

    if not plans:
        doc.add_block(cursor, TextBlock([NO_PLANS_NOTICE], "notice"))
        return doc

    for i, plan in enumerate(plans):
        if i > 0:
            cursor = doc.add_page_break(cursor)
        cursor = add_plan_section(doc, cursor, plan, teacher_names.get(plan.teacher_id, "Unknown"))
    return doc
