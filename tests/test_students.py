import pytest

from app.models.user import UserRole

from factories import auth_headers, make_student, make_user


@pytest.mark.asyncio
async def test_get_my_profile_requires_auth(client):
    res = await client.get("/api/students/me")
    assert res.status_code in (401, 403)


@pytest.mark.asyncio
async def test_bad_token_is_rejected(client):
    res = await client.get("/api/students/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_create_profile_and_read_it_back(client, db_session):
    user = await make_user(db_session, UserRole.Student)
    headers = auth_headers(user)

    payload = {
        "uce": " uce2201 ",
        "fullName": "Priya Nair",
        "email": "priya@college.edu",
        "dob": "2004-06-11",
        "department": "ECE",
        "cgpa": 9.1,
    }
    res = await client.post("/api/students", json=payload, headers=headers)
    assert res.status_code == 201
    body = res.json()
    assert body["uce"] == "UCE2201"
    assert body["fullName"] == "Priya Nair"

    me = await client.get("/api/students/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "priya@college.edu"

    again = await client.post("/api/students", json=payload, headers=headers)
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_uce_is_rejected(client, db_session, admin_headers):
    await make_student(db_session, uce="UCE3000")

    res = await client.post(
        "/api/students",
        json={"uce": "UCE3000", "fullName": "Copy", "email": "copy@college.edu"},
        headers=admin_headers,
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_cgpa_out_of_range_is_rejected(client, admin_headers):
    res = await client.post(
        "/api/students",
        json={"uce": "UCE4000", "fullName": "Odd", "email": "odd@college.edu", "cgpa": 11},
        headers=admin_headers,
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_academic_records(client, db_session):
    student = await make_student(db_session)
    headers = auth_headers(await make_user(db_session, UserRole.Student, student))

    res = await client.post(
        "/api/students/me/academics",
        json={"examType": "HSC", "schoolCollege": "KV No. 1", "boardUniversity": "CBSE", "percentage": 92.4},
        headers=headers,
    )
    assert res.status_code == 201
    assert res.json()["studentId"] == str(student.id)

    listed = await client.get("/api/students/me/academics", headers=headers)
    assert listed.status_code == 200
    assert [r["examType"] for r in listed.json()] == ["HSC"]


@pytest.mark.asyncio
async def test_student_without_profile_gets_404(client, db_session):
    headers = auth_headers(await make_user(db_session, UserRole.Student))
    res = await client.get("/api/students/me/academics", headers=headers)
    assert res.status_code == 404
