from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database.db import Base
from schemas.enums import UserRole

class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)      # 교사 고유 ID (PK)
    name = Column(String(100), nullable=False)              # 교사 이름
    email = Column(String(100), unique=True)                # 이메일
    role = Column(String(20), nullable=False, default=UserRole.TEACHER.value)  # 역할 (admin, teacher)
    assigned_classes = Column(String(100))                  # 담당 반 (콤마 구분, 예: "Nursery,LKG")

    # ✅ 이 교사가 맡은 원아들 (1:N 관계)
    students = relationship("Student", back_populates="teacher")

    # ✅ 이 교사가 작성한 교육 계획 (1:N 관계)
    teaching_plans = relationship("TeachingPlan", back_populates="teacher")
