from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from taskhub.config.settings import AppConfig

DATABASE_URL = AppConfig.DATABASE['url']

connect_args = {}
if AppConfig.is_sqlite():
    # Sessions are handed between the request thread and the threadpool
    connect_args["check_same_thread"] = False
elif AppConfig.DATABASE['sslmode']:
    # If you're using PostgreSQL on Render or similar, keep sslmode=require
    connect_args["sslmode"] = AppConfig.DATABASE['sslmode']

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=AppConfig.DATABASE['echo'],
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Request-scoped session, imported wherever a DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Session factory for components that open their own sessions"""
    return SessionLocal


def create_all_tables():
    # Import models so they are registered on the metadata
    from taskhub.models import task, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
