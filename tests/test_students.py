from bson import ObjectId

from college_portal.crud import users as users_crud

NEW_STUDENT = {
    "email": "s2@college.edu",
    "password": "secret123",
    "firstName": "Sam",
    "lastName": "Second",
    "department": "Chemistry",
    "year": 3,
    "dob": "2004-05-06",
    "contact": {"phone": "555-0123", "city": "Leeds"},
}


# ---------------------------------------------------------------- self-service


async def test_student_reads_own_profile(client, student, login_as) -> None:
    await login_as("s1@college.edu", "studentpass123", "student")

    response = await client.get("/api/students/me")

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["firstName"] == "Stu"
    assert profile["department"] == "Physics"
    assert profile["year"] == 2


async def test_student_update_only_touches_contact(client, student, login_as) -> None:
    await login_as("s1@college.edu", "studentpass123", "student")

    await client.put("/api/students/me", json={"contact": {"phone": "555-0101"}})
    response = await client.put(
        "/api/students/me",
        json={"contact": {"city": "York"}, "firstName": "Hacker", "year": 5},
    )

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["contact"] == {"phone": "555-0101", "city": "York"}
    assert profile["firstName"] == "Stu"
    assert profile["year"] == 2


async def test_student_update_rejects_bad_phone(client, student, login_as) -> None:
    await login_as("s1@college.edu", "studentpass123", "student")

    response = await client.put("/api/students/me", json={"contact": {"phone": "call me"}})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "contact.phone"


async def test_student_changes_own_password(client, student, login_as) -> None:
    await login_as("s1@college.edu", "studentpass123", "student")

    response = await client.put(
        "/api/students/me/password",
        json={"currentPassword": "studentpass123", "newPassword": "freshpass456"},
    )

    assert response.status_code == 204
    await login_as("s1@college.edu", "freshpass456", "student")


async def test_academic_cannot_use_student_self_service(client, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    assert (await client.get("/api/students/me")).status_code == 403


async def test_student_cannot_list_students(client, student, login_as) -> None:
    await login_as("s1@college.edu", "studentpass123", "student")

    assert (await client.get("/api/students")).status_code == 403


# ---------------------------------------------------------------- listing


async def test_faculty_lists_students_with_linked_accounts(client, student, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.get("/api/students")

    assert response.status_code == 200
    students = response.json()["students"]
    assert len(students) == 1
    assert students[0]["user"]["email"] == "s1@college.edu"
    assert students[0]["user"]["status"] == "active"
    assert "passwordHash" not in students[0]["user"]


async def test_list_filters(client, make_user, student, faculty_member, login_as) -> None:
    await make_user("s3@college.edu", "pass123456", "student", first_name="Olive", last_name="Oak",
                    department="Biology", year=1)
    await make_user("s4@college.edu", "pass123456", "student", first_name="Ivy", last_name="Oakley",
                    department="Biology", year=4, status="inactive")
    await login_as("prof@college.edu", "facultypass123", "academic")

    async def names(**params):
        response = await client.get("/api/students", params=params)
        assert response.status_code == 200
        return sorted(s["firstName"] for s in response.json()["students"])

    assert await names() == ["Ivy", "Olive", "Stu"]
    assert await names(department="Biology") == ["Ivy", "Olive"]
    assert await names(year=1) == ["Olive"]
    assert await names(q="oak") == ["Ivy", "Olive"]
    assert await names(status="inactive") == ["Ivy"]
    assert await names(q="(.*") == []


async def test_list_rejects_out_of_range_year(client, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.get("/api/students", params={"year": 9})

    assert response.status_code == 400


async def test_get_student_by_id(client, student, faculty_member, login_as) -> None:
    _, profile = student
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.get(f"/api/students/{profile['_id']}")

    assert response.status_code == 200
    assert response.json()["profile"]["user"]["email"] == "s1@college.edu"


async def test_get_unknown_student_is_not_found(client, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.get(f"/api/students/{ObjectId()}")

    assert response.status_code == 404


async def test_malformed_id_is_validation_error(client, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.get("/api/students/not-an-id")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid ID format"


# ---------------------------------------------------------------- administration


async def test_admin_creates_student(client, admin, login_as) -> None:
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.post("/api/students", json=NEW_STUDENT)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "s2@college.edu"
    assert body["user"]["role"] == "student"
    assert body["profile"]["lastName"] == "Second"
    assert body["profile"]["dob"].startswith("2004-05-06")

    listed = (await client.get("/api/students")).json()["students"]
    assert [s["user"]["email"] for s in listed] == ["s2@college.edu"]

    await login_as("s2@college.edu", "secret123", "student")


async def test_admin_create_with_taken_email_conflicts(client, admin, student, login_as) -> None:
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.post("/api/students", json={**NEW_STUDENT, "email": "s1@college.edu"})

    assert response.status_code == 409
    assert response.json()["code"] == "EMAIL_EXISTS"


async def test_concurrent_duplicate_is_caught_by_unique_index(client, db, admin, student, login_as, monkeypatch) -> None:
    async def never_taken(*args, **kwargs):
        return False

    # pretend the pre-check lost the race
    monkeypatch.setattr(users_crud, "email_taken", never_taken)
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.post("/api/students", json={**NEW_STUDENT, "email": "s1@college.edu"})

    assert response.status_code == 409
    assert await db["users"].count_documents({"email": "s1@college.edu"}) == 1
    assert await db["student_profiles"].count_documents({}) == 1


async def test_create_validates_payload(client, admin, login_as) -> None:
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.post(
        "/api/students",
        json={**NEW_STUDENT, "firstName": "R2D2", "year": 7, "avatarUrl": "ftp://nope"},
    )

    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert fields == {"firstName", "year", "avatarUrl"}


async def test_admin_updates_student(client, admin, student, login_as) -> None:
    _, profile = student
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.put(
        f"/api/students/{profile['_id']}",
        json={"lastName": "Renamed", "year": 3, "department": "Maths"},
    )

    assert response.status_code == 200
    updated = response.json()["profile"]
    assert updated["lastName"] == "Renamed"
    assert updated["firstName"] == "Stu"
    assert updated["year"] == 3
    assert updated["department"] == "Maths"


async def test_update_cannot_blank_required_names(client, admin, student, login_as) -> None:
    _, profile = student
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.put(f"/api/students/{profile['_id']}", json={"firstName": None})

    assert response.status_code == 400


async def test_update_unknown_student_is_not_found(client, admin, login_as) -> None:
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.put(f"/api/students/{ObjectId()}", json={"year": 2})

    assert response.status_code == 404


async def test_faculty_cannot_write_student_records(client, student, faculty_member, login_as) -> None:
    _, profile = student
    await login_as("prof@college.edu", "facultypass123", "academic")

    create = await client.post("/api/students", json=NEW_STUDENT)
    update = await client.put(f"/api/students/{profile['_id']}", json={"year": 3})
    delete = await client.delete(f"/api/students/{profile['_id']}")

    assert create.status_code == 403
    assert update.status_code == 403
    assert delete.status_code == 403


async def test_any_academic_can_toggle_student_status(client, db, student, faculty_member, login_as) -> None:
    user, profile = student
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.patch(f"/api/students/{profile['_id']}/status", json={"status": "inactive"})

    assert response.status_code == 204
    assert (await db["users"].find_one({"_id": user["_id"]}))["status"] == "inactive"

    client.cookies.clear()
    login = await client.post(
        "/api/auth/login",
        json={"email": "s1@college.edu", "password": "studentpass123", "role": "student"},
    )
    assert login.status_code == 401


async def test_toggle_status_rejects_unknown_value(client, student, faculty_member, login_as) -> None:
    _, profile = student
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.patch(f"/api/students/{profile['_id']}/status", json={"status": "suspended"})

    assert response.status_code == 400


async def test_delete_removes_profile_and_account(client, db, admin, student, login_as) -> None:
    user, profile = student
    await login_as("admin@college.edu", "adminpass123", "academic")

    response = await client.delete(f"/api/students/{profile['_id']}")

    assert response.status_code == 204
    assert await db["student_profiles"].find_one({"_id": profile["_id"]}) is None
    assert await db["users"].find_one({"_id": user["_id"]}) is None
    assert (await client.get(f"/api/students/{profile['_id']}")).status_code == 404
