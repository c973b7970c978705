# services/report_data.py
"""
보고서용 데이터 수집 (읽기 전용)

- ReportDataSource: 보고서 생성이 의존하는 조회 인터페이스
- SqlReportDataSource: SQLAlchemy 세션 기반 구현
- collect_student_report / collect_plan_report: 필터 조건에 맞는 데이터 묶음 생성
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.progress import ProgressEntry as ProgressModel
from models.students import Student as StudentModel
from models.teachers import Teacher as TeacherModel
from models.teaching_plans import TeachingPlan as TeachingPlanModel
from schemas.progress import ProgressEntry
from schemas.reports import StudentReportRequest, TeachingPlanReportRequest
from schemas.students import Student
from schemas.teaching_plans import TeachingPlan
from services.report_errors import ReportDataError

logger = logging.getLogger(__name__)

UNKNOWN_TEACHER = "Unknown"


class ReportDataSource(ABC):
    @abstractmethod
    def list_students(self, criteria: StudentReportRequest) -> List[Student]: ...
    @abstractmethod
    def list_progress(self, student_id: int) -> List[ProgressEntry]: ...
    @abstractmethod
    def list_plans(self, criteria: TeachingPlanReportRequest) -> List[TeachingPlan]: ...
    @abstractmethod
    def get_teacher_name(self, teacher_id: int) -> Optional[str]: ...


class SqlReportDataSource(ReportDataSource):
    def __init__(self, db: Session):
        self.db = db

    def list_students(self, criteria: StudentReportRequest) -> List[Student]:
        query = self.db.query(StudentModel)
        if criteria.class_name:
            query = query.filter(StudentModel.class_name == criteria.class_name.value)
        if criteria.teacher_id is not None:
            query = query.filter(StudentModel.teacher_id == criteria.teacher_id)
        records = query.order_by(StudentModel.name, StudentModel.id).all()
        return [Student.model_validate(r) for r in records]

    def list_progress(self, student_id: int) -> List[ProgressEntry]:
        records = (
            self.db.query(ProgressModel)
            .filter(ProgressModel.student_id == student_id)
            .order_by(ProgressModel.date.desc(), ProgressModel.id.desc())
            .all()
        )
        return [ProgressEntry.model_validate(r) for r in records]

    def list_plans(self, criteria: TeachingPlanReportRequest) -> List[TeachingPlan]:
        query = self.db.query(TeachingPlanModel)
        if criteria.type:
            query = query.filter(TeachingPlanModel.type == criteria.type.value)
        if criteria.class_name:
            query = query.filter(TeachingPlanModel.class_name == criteria.class_name.value)
        if criteria.teacher_id is not None:
            query = query.filter(TeachingPlanModel.teacher_id == criteria.teacher_id)
        # 기간이 겹치는 계획만 (경계 포함)
        if criteria.start_date:
            query = query.filter(TeachingPlanModel.end_date >= criteria.start_date)
        if criteria.end_date:
            query = query.filter(TeachingPlanModel.start_date <= criteria.end_date)
        records = query.order_by(TeachingPlanModel.start_date, TeachingPlanModel.id).all()
        return [TeachingPlan.model_validate(r) for r in records]

    def get_teacher_name(self, teacher_id: int) -> Optional[str]:
        teacher = self.db.query(TeacherModel).filter(TeacherModel.id == teacher_id).first()
        return teacher.name if teacher else None


@dataclass
class StudentReportData:
    students: List[Student] = field(default_factory=list)
    progress_by_student: Dict[int, List[ProgressEntry]] = field(default_factory=dict)
    teacher_names: Dict[int, str] = field(default_factory=dict)


@dataclass
class PlanReportData:
    plans: List[TeachingPlan] = field(default_factory=list)
    teacher_names: Dict[int, str] = field(default_factory=dict)


def newest_first(entries: List[ProgressEntry]) -> List[ProgressEntry]:
    return sorted(entries, key=lambda e: (e.date, e.id), reverse=True)


def _resolve_teacher_names(source: ReportDataSource, teacher_ids) -> Dict[int, str]:
    names = {}
    for teacher_id in sorted(set(teacher_ids)):
        names[teacher_id] = source.get_teacher_name(teacher_id) or UNKNOWN_TEACHER
    return names


def collect_student_report(source: ReportDataSource, criteria: StudentReportRequest) -> StudentReportData:
    """학생 목록 + 학생별 진도 기록(최신순, 기간 필터 적용) 수집"""
    try:
        students = source.list_students(criteria)
        progress_by_student = {}
        for student in students:
            entries = source.list_progress(student.id)
            if criteria.start_date:
                entries = [e for e in entries if e.date >= criteria.start_date]
            if criteria.end_date:
                entries = [e for e in entries if e.date <= criteria.end_date]
            progress_by_student[student.id] = newest_first(entries)
        teacher_names = _resolve_teacher_names(source, (s.teacher_id for s in students))
    except SQLAlchemyError as e:
        raise ReportDataError(f"학생 보고서 데이터 조회 실패: {e}") from e

    logger.info(f"학생 보고서 데이터 수집 완료: students={len(students)}")
    return StudentReportData(students, progress_by_student, teacher_names)


def collect_plan_report(source: ReportDataSource, criteria: TeachingPlanReportRequest) -> PlanReportData:
    """필터 조건에 맞는 교육 계획 + 작성 교사 이름 수집"""
    try:
        plans = source.list_plans(criteria)
        teacher_names = _resolve_teacher_names(source, (p.teacher_id for p in plans))
    except SQLAlchemyError as e:
        raise ReportDataError(f"교육 계획 데이터 조회 실패: {e}") from e

    logger.info(f"교육 계획 데이터 수집 완료: plans={len(plans)}")
    return PlanReportData(plans, teacher_names)
