from coursehub.db.base import Base
from coursehub.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
