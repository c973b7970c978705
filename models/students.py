from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 원아 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)               # 고유 학생 ID (Primary Key)
    name = Column(String(100), nullable=False)                       # 학생 이름
    age = Column(Integer, nullable=False)                            # 나이 (3~5세)
    class_name = Column("class", String(20), nullable=False, index=True)  # 반 (Nursery, LKG, UKG)
    parent_contact = Column(String(50))                              # 보호자 연락처
    learning_ability = Column(String(30), nullable=False)            # 학습 능력 (Talented, Average, Slow Learner)
    writing_speed = Column(String(30))                               # 쓰기 속도 (Nursery는 NULL)
    notes = Column(Text)                                             # 비고
    photo_url = Column(String(500))                                  # 사진 URL (외부 호스팅)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)  # 담당 교사 ID (FK)

    # ✅ 관계 설정: Student ↔ ProgressEntry (1:N)
    progress_entries = relationship("ProgressEntry", back_populates="student", cascade="all, delete-orphan")

    # ✅ 관계 설정: Student ↔ Teacher (N:1)
    teacher = relationship("Teacher", back_populates="students")
