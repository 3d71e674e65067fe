from college_portal.utils.tokens import issue_access_token, issue_refresh_token


async def test_protected_route_without_cookie_is_unauthorized(client) -> None:
    response = await client.get("/api/faculty")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: No token provided"


async def test_garbage_access_token_is_unauthorized(client) -> None:
    client.cookies.set("access_token", "garbage")

    response = await client.get("/api/faculty")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Invalid or expired token"


async def test_refresh_token_cannot_be_used_as_access_token(client, admin) -> None:
    client.cookies.set("access_token", issue_refresh_token(str(admin["_id"]), "academic"))

    response = await client.get("/api/faculty")

    assert response.status_code == 401


async def test_expired_access_token_is_unauthorized(client, admin) -> None:
    client.cookies.set("access_token", issue_access_token(str(admin["_id"]), "academic", expires_in=-5))

    response = await client.get("/api/faculty")

    assert response.status_code == 401


async def test_token_for_deleted_account_is_unauthorized(client, db, admin) -> None:
    client.cookies.set("access_token", issue_access_token(str(admin["_id"]), "academic"))
    await db["users"].delete_one({"_id": admin["_id"]})

    response = await client.get("/api/faculty")

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: User not found"


async def test_valid_token_for_inactive_account_is_forbidden(client, db, student, login_as) -> None:
    user, _ = student
    await login_as("s1@college.edu", "studentpass123", "student")
    await db["users"].update_one({"_id": user["_id"]}, {"$set": {"status": "inactive"}})

    response = await client.get("/api/students/me")

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: Account is inactive"


async def test_role_gate_uses_the_stored_role(client, student) -> None:
    user, _ = student
    # the role claim in the token is not trusted
    client.cookies.set("access_token", issue_access_token(str(user["_id"]), "academic"))

    response = await client.get("/api/faculty")

    assert response.status_code == 403


async def test_faculty_member_is_not_an_administrator(client, faculty_member, login_as) -> None:
    await login_as("prof@college.edu", "facultypass123", "academic")

    response = await client.delete(f"/api/faculty/{faculty_member['_id']}")

    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: Administrator access required"
