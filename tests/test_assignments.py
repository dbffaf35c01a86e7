from datetime import datetime, timedelta, timezone

from coursehub.models.submission import Submission

HW = {
    "title": "HW2",
    "description": "Second homework",
    "due_at": "2030-01-15T23:59:00Z",
    "max_points": 50,
}


def test_owner_creates_assignment(client, auth, seed):
    r = client.post(f"/courses/{seed['cs101']}/assignments", json=HW, headers=auth("instructor1"))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["course_id"] == seed["cs101"]
    assert body["created_by_id"] == seed["instructor1"]
    assert body["max_points"] == 50


def test_other_instructor_cannot_create(client, auth, seed):
    r = client.post(f"/courses/{seed['cs101']}/assignments", json=HW, headers=auth("instructor2"))
    assert r.status_code == 403


def test_student_cannot_create(client, auth, seed):
    r = client.post(f"/courses/{seed['cs101']}/assignments", json=HW, headers=auth("student1"))
    assert r.status_code == 403


def test_negative_max_points_is_rejected(client, auth, seed):
    r = client.post(
        f"/courses/{seed['cs101']}/assignments",
        json={**HW, "max_points": -1},
        headers=auth("instructor1"),
    )
    assert r.status_code == 422


def test_listing_is_ordered_by_due_date(client, auth, seed):
    client.post(
        f"/courses/{seed['cs101']}/assignments",
        json={**HW, "title": "Later", "due_at": "2031-01-01T00:00:00Z"},
        headers=auth("instructor1"),
    )
    r = client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("instructor1"))
    assert r.status_code == 200
    rows = r.json()
    assert [a["title"] for a in rows] == ["HW1", "Later"]
    # instructors do not get per-student status
    assert "has_submitted" not in rows[0]


def test_student_listing_includes_own_status(client, auth, seed):
    r = client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("student1"))
    assert r.json()[0]["has_submitted"] is False
    assert r.json()[0]["submission"] is None

    client.post(
        f"/assignments/{seed['hw1']}/submissions",
        headers=auth("student1"),
        files={"file": ("work.txt", b"hello", "text/plain")},
    )

    row = client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("student1")).json()[0]
    assert row["has_submitted"] is True
    assert row["submission"]["file_name"] == "work.txt"


def test_listing_requires_membership(client, auth, seed):
    assert client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("student2")).status_code == 403
    assert client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("instructor2")).status_code == 403


def test_read_single_assignment(client, auth, seed):
    assert client.get(f"/assignments/{seed['hw1']}", headers=auth("student1")).status_code == 200
    assert client.get(f"/assignments/{seed['hw1']}", headers=auth("student2")).status_code == 403
    assert client.get("/assignments/999999", headers=auth("student1")).status_code == 404


def test_update_assignment(client, auth, seed):
    r = client.put(
        f"/assignments/{seed['hw1']}",
        json={"title": "HW1 (revised)", "max_points": 80},
        headers=auth("instructor1"),
    )
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "HW1 (revised)"
    assert r.json()["max_points"] == 80
    assert r.json()["description"] == "First homework"

    r = client.put(f"/assignments/{seed['hw1']}", json={"title": "x"}, headers=auth("instructor2"))
    assert r.status_code == 403


def test_max_points_cannot_drop_below_existing_grade(client, auth, seed):
    sub = client.post(
        f"/assignments/{seed['hw1']}/submissions",
        headers=auth("student1"),
        files={"file": ("work.txt", b"hello", "text/plain")},
    ).json()
    client.patch(f"/submissions/{sub['id']}/grade", json={"grade": 70}, headers=auth("instructor1"))

    r = client.put(f"/assignments/{seed['hw1']}", json={"max_points": 60}, headers=auth("instructor1"))
    assert r.status_code == 400

    r = client.put(f"/assignments/{seed['hw1']}", json={"max_points": 70}, headers=auth("instructor1"))
    assert r.status_code == 200


def test_delete_assignment_removes_submissions(client, auth, seed, db, storage):
    sub = client.post(
        f"/assignments/{seed['hw1']}/submissions",
        headers=auth("student1"),
        files={"file": ("work.txt", b"hello", "text/plain")},
    ).json()

    assert client.delete(f"/assignments/{seed['hw1']}", headers=auth("student1")).status_code == 403

    r = client.delete(f"/assignments/{seed['hw1']}", headers=auth("instructor1"))
    assert r.status_code == 200

    assert db.get(Submission, sub["id"]) is None
    assert not storage.path_for(sub["file_url"]).exists()
    assert client.get(f"/assignments/{seed['hw1']}", headers=auth("instructor1")).status_code == 404


def test_non_finite_max_points_is_rejected(client, auth, seed):
    headers = {**auth("instructor1"), "Content-Type": "application/json"}
    for value in ("Infinity", "NaN"):
        raw = (
            '{"title": "HW3", "description": "x", '
            f'"due_at": "2030-01-15T23:59:00Z", "max_points": {value}}}'
        )
        r = client.post(f"/courses/{seed['cs101']}/assignments", content=raw, headers=headers)
        assert r.status_code == 422, r.text

        r = client.put(f"/assignments/{seed['hw1']}", content=f'{{"max_points": {value}}}', headers=headers)
        assert r.status_code == 422, r.text

    r = client.get(f"/assignments/{seed['hw1']}", headers=auth("instructor1"))
    assert r.json()["max_points"] == 100


def test_due_date_keeps_its_utc_offset(client, auth, seed):
    r = client.post(f"/courses/{seed['cs101']}/assignments", json=HW, headers=auth("instructor1"))
    due_at = datetime.fromisoformat(r.json()["due_at"].replace("Z", "+00:00"))
    assert due_at == datetime(2030, 1, 15, 23, 59, tzinfo=timezone.utc)
    assert due_at.utcoffset() == timedelta(0)

    listed = client.get(f"/courses/{seed['cs101']}/assignments", headers=auth("student1")).json()
    for row in listed:
        assert datetime.fromisoformat(row["due_at"].replace("Z", "+00:00")).tzinfo is not None
