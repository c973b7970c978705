from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base, sessionmaker  # 모델 Base 클래스 / 세션 팩토리

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

# ✅ SQLite는 요청 스레드가 달라질 수 있으므로 check_same_thread 해제
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


# ✅ 라우터에서 Depends(get_db)로 사용하는 요청 단위 세션
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
