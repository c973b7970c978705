"""
데모 데이터 생성 스크립트
실행: python -m scripts.seed_demo

- 테이블 생성 후 기본 관리자/교사 계정과 샘플 원아, 진도 기록, 교육 계획을 추가
- 이미 교사 데이터가 있으면 아무것도 하지 않음
"""

from datetime import date

from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine
from models.teachers import Teacher as TeacherModel
from models.students import Student as StudentModel
from models.progress import ProgressEntry as ProgressModel
from models.teaching_plans import TeachingPlan as TeachingPlanModel
from schemas.enums import UserRole

# ✅ 기본 계정 (관리자 1명 + 반별 담임 3명)
DEFAULT_TEACHERS = [
    {"name": "Admin User", "email": "admin@school.com", "role": UserRole.ADMIN, "assigned_classes": ""},
    {"name": "Anita Gurung", "email": "teacher1@school.com", "role": UserRole.TEACHER, "assigned_classes": "Nursery"},
    {"name": "Binay Shrestha", "email": "teacher2@school.com", "role": UserRole.TEACHER, "assigned_classes": "LKG"},
    {"name": "Champa Devi", "email": "teacher3@school.com", "role": UserRole.TEACHER, "assigned_classes": "UKG"},
]


def seed_records(db: Session) -> bool:
    """데모 데이터 추가 (이미 교사가 있으면 False)"""
    if db.query(TeacherModel).count() > 0:
        return False

    teachers = [TeacherModel(**{**t, "role": t["role"].value}) for t in DEFAULT_TEACHERS]
    db.add_all(teachers)
    db.flush()
    by_class = {t.assigned_classes: t for t in teachers if t.role == UserRole.TEACHER.value}

    aarav = StudentModel(name="Aarav Sharma", age=3, class_name="Nursery",
                         learning_ability="Average", teacher_id=by_class["Nursery"].id)
    sita = StudentModel(name="Sita Thapa", age=5, class_name="UKG", learning_ability="Talented",
                        writing_speed="Speed Writing", parent_contact="98XXXXXXXX",
                        teacher_id=by_class["UKG"].id)
    db.add_all([aarav, sita])
    db.flush()

    db.add_all([
        ProgressModel(student_id=sita.id, date=date(2024, 5, 10), social_skills="Excellent",
                      pre_literacy="Good", pre_numeracy="Excellent", motor_skills="Good",
                      emotional_development="Excellent", comments="Reads short words confidently."),
        ProgressModel(student_id=sita.id, date=date(2024, 4, 12), social_skills="Good",
                      pre_literacy="Good", pre_numeracy="Needs Improvement", motor_skills="Good",
                      emotional_development="Good"),
    ])
    db.add(TeachingPlanModel(
        type="Weekly", class_name="UKG", title="Shapes Around Us",
        description="Identify basic shapes in the classroom and at home.",
        activities="Shape hunt, clay modelling, shape sorting game.",
        goals="Name and draw circle, square, triangle and rectangle.",
        start_date=date(2024, 5, 6), end_date=date(2024, 5, 10),
        teacher_id=by_class["UKG"].id,
    ))
    db.commit()
    return True


def seed_demo():
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    try:
        if seed_records(db):
            print("✅ 데모 데이터 생성 완료")
        else:
            print("ℹ️ 이미 데이터가 있어 시드를 건너뜁니다")
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo()
