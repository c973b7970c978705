from enum import Enum

# ==========================================================
# [공통 코드값] 원본 시스템과 동일한 문자열 값을 그대로 사용
# ==========================================================

class ClassLevel(str, Enum):
    NURSERY = "Nursery"
    LKG = "LKG"
    UKG = "UKG"


class LearningAbility(str, Enum):
    TALENTED = "Talented"
    AVERAGE = "Average"
    SLOW_LEARNER = "Slow Learner"


class WritingSpeed(str, Enum):
    SLOW = "Slow Writing"
    SPEED = "Speed Writing"


class ProgressRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class PlanType(str, Enum):
    ANNUAL = "Annual"
    MONTHLY = "Monthly"
    WEEKLY = "Weekly"


class UserRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
