from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class TeachingPlan(Base):
    __tablename__ = "teaching_plans"  # 연간/월간/주간 교육 계획 테이블

    id = Column(Integer, primary_key=True, index=True)                    # 계획 고유 ID (PK)
    type = Column(String(20), nullable=False, index=True)                 # 계획 유형 (Annual, Monthly, Weekly)
    class_name = Column("class", String(20), nullable=False, index=True)  # 대상 반
    title = Column(String(200), nullable=False)                           # 제목
    description = Column(Text, nullable=False)                            # 설명
    activities = Column(Text, nullable=False)                             # 활동 내용
    goals = Column(Text, nullable=False)                                  # 학습 목표
    start_date = Column(Date, nullable=False)                             # 시작일
    end_date = Column(Date, nullable=False)                               # 종료일
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)  # 작성 교사 ID (FK)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)  # 생성 시각

    # ✅ 관계 설정: TeachingPlan ↔ Teacher (N:1)
    teacher = relationship("Teacher", back_populates="teaching_plans")
