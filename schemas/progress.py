from pydantic import BaseModel
from datetime import date
from typing import Optional

from schemas.enums import ProgressRating

# ==========================================================
# [입력용 스키마]
# ==========================================================
class ProgressEntryCreate(BaseModel):
    student_id: int                             # 학생 ID (students 테이블과 연동)
    date: date                                  # 기록 일자
    social_skills: ProgressRating               # 사회성
    pre_literacy: ProgressRating                # 읽기 준비
    pre_numeracy: ProgressRating                # 수 개념
    motor_skills: ProgressRating                # 운동 능력
    emotional_development: ProgressRating       # 정서 발달
    comments: Optional[str] = None              # 코멘트


# ==========================================================
# [출력용 스키마]
# ==========================================================
class ProgressEntry(ProgressEntryCreate):
    id: int                                     # 기록 고유 ID

    class Config:
        from_attributes = True
