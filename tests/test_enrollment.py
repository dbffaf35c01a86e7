import pytest

from coursehub.core.errors import InvalidInput, NotFound
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.models.user import User
from coursehub.services import enrollment


def test_enroll_is_visible_from_both_sides(db, seed):
    course = enrollment.enroll(db, seed["student2"], "CS101")
    assert course.id == seed["cs101"]

    db.expire_all()
    student = db.get(User, seed["student2"])
    course = db.get(Course, seed["cs101"])
    assert course.id in {c.id for c in student.enrolled_courses}
    assert student.id in {s.id for s in course.students}


def test_enroll_code_is_case_insensitive(db, seed):
    course = enrollment.enroll(db, seed["student2"], "  cs202 ")
    assert course.code == "CS202"


def test_enroll_unknown_code(db, seed):
    with pytest.raises(NotFound):
        enrollment.enroll(db, seed["student2"], "NOPE999")


def test_enroll_twice_is_rejected(db, seed):
    with pytest.raises(InvalidInput) as excinfo:
        enrollment.enroll(db, seed["student1"], "CS101")
    assert "Already enrolled" in excinfo.value.message

    count = (
        db.query(Enrollment)
        .filter(Enrollment.student_id == seed["student1"], Enrollment.course_id == seed["cs101"])
        .count()
    )
    assert count == 1


def test_unenroll_removes_both_sides_and_is_idempotent(db, seed):
    enrollment.unenroll(db, seed["student1"], seed["cs101"])
    db.expire_all()

    student = db.get(User, seed["student1"])
    course = db.get(Course, seed["cs101"])
    assert student.enrolled_courses == []
    assert course.students == []

    # second call is a no-op
    enrollment.unenroll(db, seed["student1"], seed["cs101"])
    assert db.query(Enrollment).count() == 0


def test_unenroll_unknown_course(db, seed):
    with pytest.raises(NotFound):
        enrollment.unenroll(db, seed["student1"], 987654)


def test_enroll_endpoint(client, auth, seed):
    r = client.post("/courses/enroll", json={"code": "cs202"}, headers=auth("student2"))
    assert r.status_code == 200, r.text
    assert r.json()["course"]["code"] == "CS202"

    r = client.get("/courses/enrolled", headers=auth("student2"))
    assert [c["code"] for c in r.json()] == ["CS202"]


def test_enroll_endpoint_errors(client, auth):
    r = client.post("/courses/enroll", json={"code": "CS101"}, headers=auth("student1"))
    assert r.status_code == 400
    assert r.json()["kind"] == "InvalidInput"

    r = client.post("/courses/enroll", json={"code": "ZZZ"}, headers=auth("student1"))
    assert r.status_code == 404
    assert r.json()["kind"] == "NotFound"


def test_instructor_cannot_enroll(client, auth):
    r = client.post("/courses/enroll", json={"code": "CS202"}, headers=auth("instructor1"))
    assert r.status_code == 403


def test_unenroll_endpoint_twice(client, auth, seed):
    url = f"/courses/{seed['cs101']}/unenroll"
    assert client.post(url, headers=auth("student1")).status_code == 200
    assert client.post(url, headers=auth("student1")).status_code == 200

    r = client.get(f"/courses/{seed['cs101']}", headers=auth("student1"))
    assert r.status_code == 403
