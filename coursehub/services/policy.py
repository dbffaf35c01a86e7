"""
Authorization predicates.

Every rule is a pure function of the principal, the target entity and a few
already-loaded context entities. Rules are looked up by ``(role, action)``;
anything not in the table is denied.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from coursehub.core.errors import Forbidden


class Role(str, enum.Enum):
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class Action(str, enum.Enum):
    COURSE_LIST = "course.list"
    COURSE_READ = "course.read"
    COURSE_CREATE = "course.create"
    COURSE_UPDATE = "course.update"
    COURSE_DELETE = "course.delete"
    COURSE_ENROLL = "course.enroll"
    COURSE_UNENROLL = "course.unenroll"
    COURSE_LIST_ENROLLED = "course.list_enrolled"

    ASSIGNMENT_READ = "assignment.read"
    ASSIGNMENT_CREATE = "assignment.create"
    ASSIGNMENT_UPDATE = "assignment.update"
    ASSIGNMENT_DELETE = "assignment.delete"

    MATERIAL_READ = "material.read"
    MATERIAL_CREATE = "material.create"
    MATERIAL_UPDATE = "material.update"
    MATERIAL_DELETE = "material.delete"

    SUBMISSION_LIST = "submission.list"
    SUBMISSION_READ = "submission.read"
    SUBMISSION_CREATE = "submission.create"
    SUBMISSION_GRADE = "submission.grade"
    SUBMISSION_DELETE = "submission.delete"
    SUBMISSION_LIST_OWN = "submission.list_own"

    GRADEBOOK_READ = "gradebook.read"
    GRADES_READ = "grades.read"
    GRADES_OVERVIEW = "grades.overview"


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role
    enrolled_course_ids: frozenset = field(default_factory=frozenset)

    def owns(self, course) -> bool:
        return course is not None and course.instructor_id == self.id

    def is_enrolled(self, course_id) -> bool:
        return course_id in self.enrolled_course_ids


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


Rule = Callable[[Principal, Any, Mapping[str, Any]], Decision]


def _always(principal, target, ctx):
    return ALLOW


def _owns_target_course(message: str) -> Rule:
    def rule(principal, course, ctx):
        return ALLOW if principal.owns(course) else deny(message)
    return rule


def _owns_context_course(message: str) -> Rule:
    def rule(principal, target, ctx):
        return ALLOW if principal.owns(ctx.get("course")) else deny(message)
    return rule


def _enrolled_in_target_course(principal, course, ctx):
    if course is not None and principal.is_enrolled(course.id):
        return ALLOW
    return deny("Not enrolled in this course")


def _enrolled_in_context_course(principal, target, ctx):
    course = ctx.get("course")
    if course is not None and principal.is_enrolled(course.id):
        return ALLOW
    return deny("Not enrolled in this course")


def _enrolled_in_target_parent(principal, target, ctx):
    # target is an assignment
    if target is not None and principal.is_enrolled(target.course_id):
        return ALLOW
    return deny("Not enrolled in this course")


def _authored_in_owned_course(author_field: str, message: str) -> Rule:
    def rule(principal, target, ctx):
        if getattr(target, author_field, None) != principal.id:
            return deny(message)
        if not principal.owns(ctx.get("course")):
            return deny(message)
        return ALLOW
    return rule


def _owns_submission(message: str) -> Rule:
    def rule(principal, submission, ctx):
        if submission is not None and submission.student_id == principal.id:
            return ALLOW
        return deny(message)
    return rule


I, S = Role.INSTRUCTOR, Role.STUDENT

RULES: dict[tuple[Role, Action], Rule] = {
    # courses
    (I, Action.COURSE_LIST): _always,
    (S, Action.COURSE_LIST): _always,
    (I, Action.COURSE_READ): _owns_target_course("Not authorized to access this course"),
    (S, Action.COURSE_READ): _enrolled_in_target_course,
    (I, Action.COURSE_CREATE): _always,
    (I, Action.COURSE_UPDATE): _owns_target_course("Not authorized to update this course"),
    (I, Action.COURSE_DELETE): _owns_target_course("Not authorized to delete this course"),
    (S, Action.COURSE_ENROLL): _always,
    (S, Action.COURSE_UNENROLL): _always,
    (S, Action.COURSE_LIST_ENROLLED): _always,
    # assignments
    (I, Action.ASSIGNMENT_READ): _owns_context_course("Not authorized to access this course"),
    (S, Action.ASSIGNMENT_READ): _enrolled_in_context_course,
    (I, Action.ASSIGNMENT_CREATE): _owns_target_course(
        "Not authorized to create assignments for this course"
    ),
    (I, Action.ASSIGNMENT_UPDATE): _authored_in_owned_course(
        "created_by_id", "Not authorized to update this assignment"
    ),
    (I, Action.ASSIGNMENT_DELETE): _authored_in_owned_course(
        "created_by_id", "Not authorized to delete this assignment"
    ),
    # materials
    (I, Action.MATERIAL_READ): _owns_context_course("Not authorized to access this course"),
    (S, Action.MATERIAL_READ): _enrolled_in_context_course,
    (I, Action.MATERIAL_CREATE): _owns_target_course(
        "Not authorized to upload materials to this course"
    ),
    (I, Action.MATERIAL_UPDATE): _authored_in_owned_course(
        "uploaded_by_id", "Not authorized to update this material"
    ),
    (I, Action.MATERIAL_DELETE): _authored_in_owned_course(
        "uploaded_by_id", "Not authorized to delete this material"
    ),
    # submissions
    (I, Action.SUBMISSION_LIST): _owns_context_course("Not authorized to view these submissions"),
    (I, Action.SUBMISSION_READ): _owns_context_course("Not authorized to view this submission"),
    (S, Action.SUBMISSION_READ): _owns_submission("Not authorized to view this submission"),
    (S, Action.SUBMISSION_CREATE): _enrolled_in_target_parent,
    (I, Action.SUBMISSION_GRADE): _owns_context_course("Not authorized to grade this submission"),
    (S, Action.SUBMISSION_DELETE): _owns_submission("Not authorized to delete this submission"),
    (S, Action.SUBMISSION_LIST_OWN): _always,
    # grades
    (I, Action.GRADEBOOK_READ): _owns_target_course("Not authorized to view this grade book"),
    (S, Action.GRADES_READ): _enrolled_in_target_course,
    (S, Action.GRADES_OVERVIEW): _always,
}


def can_access(
    principal: Principal,
    action: Action,
    target: Any = None,
    context: Mapping[str, Any] | None = None,
) -> Decision:
    rule = RULES.get((principal.role, action))
    if rule is None:
        return deny(f"Role '{principal.role.value}' may not perform {action.value}")
    return rule(principal, target, context or {})


def authorize(
    principal: Principal,
    action: Action,
    target: Any = None,
    **context: Any,
) -> None:
    decision = can_access(principal, action, target, context)
    if not decision:
        raise Forbidden(decision.reason or "Forbidden")
