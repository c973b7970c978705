from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base
# 관계 문자열("Teacher", "ProgressEntry" 등) 해석을 위해 모든 모델 등록
from models.teachers import Teacher as TeacherModel  # noqa: F401
from models.students import Student as StudentModel  # noqa: F401
from models.progress import ProgressEntry as ProgressModel  # noqa: F401
from models.teaching_plans import TeachingPlan as TeachingPlanModel  # noqa: F401
from schemas.progress import ProgressEntry
from schemas.students import Student
from schemas.teaching_plans import TeachingPlan
from services.pdf.composer import SchoolInfo

GENERATED_ON = date(2024, 6, 1)
SCHOOL = SchoolInfo("Nepal Central High School", "Narephat, Kathmandu", "Pre-Primary Student Record System")


@pytest.fixture
def school():
    return SCHOOL


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_student():
    def _make(id=1, name="Sita Thapa", class_name="UKG", age=5, learning_ability="Talented",
              writing_speed="Speed Writing", photo_url=None, teacher_id=1, parent_contact=None):
        return Student(id=id, name=name, class_name=class_name, age=age, learning_ability=learning_ability,
                       writing_speed=writing_speed, photo_url=photo_url, teacher_id=teacher_id,
                       parent_contact=parent_contact)
    return _make


@pytest.fixture
def make_entry():
    def _make(id=1, student_id=1, day=date(2024, 5, 1), rating="Good", comments=None):
        return ProgressEntry(id=id, student_id=student_id, date=day, social_skills=rating,
                             pre_literacy=rating, pre_numeracy=rating, motor_skills=rating,
                             emotional_development=rating, comments=comments)
    return _make


@pytest.fixture
def make_plan():
    def _make(id=1, type="Weekly", class_name="UKG", title="Shapes Around Us", teacher_id=1,
              description="Identify basic shapes.", activities="Shape hunt.", goals="Name four shapes.",
              start_date=date(2024, 5, 6), end_date=date(2024, 5, 10)):
        return TeachingPlan(id=id, type=type, class_name=class_name, title=title, description=description,
                            activities=activities, goals=goals, start_date=start_date, end_date=end_date,
                            teacher_id=teacher_id)
    return _make
