"""
schemas/reports.py

- PDF 보고서 요청 스키마 (필터 조건)
- 저장되지 않는 파생 데이터: 어떤 학생/계획을 보고서에 담을지 결정
"""

from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import Optional

from schemas.enums import ClassLevel, PlanType


class _DateRangeMixin(BaseModel):
    start_date: Optional[date] = Field(default=None, description="기간 시작일 (포함)")
    end_date: Optional[date] = Field(default=None, description="기간 종료일 (포함)")

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


# ✅ 학생 진도 보고서 요청
class StudentReportRequest(_DateRangeMixin):
    class_name: Optional[ClassLevel] = Field(default=None, description="반 필터 (없으면 전체)")
    teacher_id: Optional[int] = Field(default=None, description="담당 교사 필터")
    include_photos: bool = Field(default=False, description="학생 사진 포함 여부")


# ✅ 교육 계획 보고서 요청
class TeachingPlanReportRequest(_DateRangeMixin):
    type: Optional[PlanType] = Field(default=None, description="계획 유형 필터")
    class_name: Optional[ClassLevel] = Field(default=None, description="반 필터 (없으면 전체)")
    teacher_id: Optional[int] = Field(default=None, description="작성 교사 필터")
