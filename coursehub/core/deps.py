from coursehub.core.config import settings
from coursehub.db.session import SessionLocal
from coursehub.services.storage import FileStorage


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> FileStorage:
    return FileStorage(
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        allowed_extensions=settings.ALLOWED_EXTENSIONS,
    )
