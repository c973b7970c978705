from pydantic import BaseModel, Field
from typing import Optional

from schemas.enums import ClassLevel, LearningAbility, WritingSpeed

# ✅ 입력용 (POST/PUT 등)
class StudentCreate(BaseModel):
    name: str                                        # 학생 이름
    age: int = Field(..., ge=2, le=7)                # 나이
    class_name: ClassLevel                           # 반 (Nursery, LKG, UKG)
    learning_ability: LearningAbility                # 학습 능력
    writing_speed: Optional[WritingSpeed] = None     # 쓰기 속도 (Nursery는 없음)
    parent_contact: Optional[str] = None             # 보호자 연락처
    notes: Optional[str] = None                      # 비고
    photo_url: Optional[str] = None                  # 사진 URL
    teacher_id: int                                  # 담당 교사 ID

# ✅ 전체 출력용 (GET, 보고서 생성 등)
class Student(StudentCreate):
    id: int

    class Config:
        from_attributes = True  # Pydantic v2 기준
