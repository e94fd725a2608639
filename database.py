from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

# create engine
engine = create_engine(settings.database_url, connect_args=connect_args)

# session maker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# base class
Base = declarative_base()


def init_db(bind=None):
    """Create every table that does not exist yet."""
    import models  # noqa: F401  (registers the tables on Base.metadata)
    Base.metadata.create_all(bind=bind or engine)


# dependency (one session per request)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
