from pydantic import BaseModel, model_validator
from datetime import date
from typing import Optional

from schemas.enums import ClassLevel, PlanType

# ==========================================================
# [입력용 스키마]
# ==========================================================
class TeachingPlanCreate(BaseModel):
    type: PlanType                  # 계획 유형 (Annual, Monthly, Weekly)
    class_name: ClassLevel          # 대상 반
    title: str                      # 제목
    description: str                # 설명
    activities: str                 # 활동 내용
    goals: str                      # 학습 목표
    start_date: date                # 시작일
    end_date: date                  # 종료일
    teacher_id: int                 # 작성 교사 ID

    @model_validator(mode="after")
    def _check_period(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


# ==========================================================
# [출력용 스키마]
# ==========================================================
class TeachingPlan(TeachingPlanCreate):
    id: int                         # 계획 고유 ID

    class Config:
        from_attributes = True
