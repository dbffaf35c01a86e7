# Base with every model registered, for create_all / drop_all
from coursehub.db.base_class import Base  # noqa: F401
from coursehub.models import assignment, course, enrollment, material, submission, user  # noqa: F401
