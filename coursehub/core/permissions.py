from fastapi import Depends
from sqlalchemy.orm import Session

from coursehub.core.current_user import get_current_user
from coursehub.core.deps import get_db
from coursehub.models.user import User
from coursehub.services.enrollment import enrolled_course_ids
from coursehub.services.policy import Principal, Role


def get_principal(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Principal:
    role = Role(current_user.role)
    enrolled = (
        enrolled_course_ids(db, current_user.id)
        if role is Role.STUDENT
        else frozenset()
    )
    return Principal(id=current_user.id, role=role, enrolled_course_ids=enrolled)
