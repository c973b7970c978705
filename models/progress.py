from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class ProgressEntry(Base):
    __tablename__ = "progress"  # 발달 영역별 진도 기록 테이블

    id = Column(Integer, primary_key=True, index=True)                    # 기록 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)  # 학생 ID (FK)
    date = Column(Date, nullable=False)                                   # 기록 일자

    # ✅ 5개 발달 영역 평가 (Excellent, Good, Needs Improvement)
    social_skills = Column(String(30), nullable=False)
    pre_literacy = Column(String(30), nullable=False)
    pre_numeracy = Column(String(30), nullable=False)
    motor_skills = Column(String(30), nullable=False)
    emotional_development = Column(String(30), nullable=False)

    comments = Column(Text)                                               # 교사 코멘트 (선택)

    # ✅ 관계 설정: ProgressEntry ↔ Student (N:1)
    student = relationship("Student", back_populates="progress_entries")
