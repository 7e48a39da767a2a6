"""Doctor search: speciality filter AND free-text OR group."""
import pytest

from app.services.doctor_service import search_doctors


@pytest.fixture
async def doctors(make_doctor):
    return {
        "cardio": await make_doctor(
            name="Dr. Asha Rao", specialty="Cardiologist",
            hospital_name="City Hospital", hospital_location="Bengaluru",
            email="asha@sunrise-clinic.in", password="secret123",
        ),
        "neuro": await make_doctor(
            name="Dr. Meera Iyer", specialty="Neurologist",
            hospital_name="Sunrise Clinic", hospital_location="Chennai",
        ),
        "derm": await make_doctor(
            name="Dr. Karan Shah", specialty="Dermatologist",
            hospital_name="city hospital annex", hospital_location="Pune",
        ),
    }


async def test_free_text_matches_hospital_name_case_insensitively(transaction, doctors):
    async with transaction() as session:
        results = await search_doctors(session, "City Hospital")
    assert {d.id for d in results} == {doctors["cardio"].id, doctors["derm"].id}


async def test_free_text_matches_any_field(transaction, doctors):
    async with transaction() as session:
        by_location = await search_doctors(session, "chennai")
        by_specialty = await search_doctors(session, "derma")
        by_name = await search_doctors(session, "asha")
    assert [d.id for d in by_location] == [doctors["neuro"].id]
    assert [d.id for d in by_specialty] == [doctors["derm"].id]
    assert [d.id for d in by_name] == [doctors["cardio"].id]


async def test_speciality_and_free_text_are_combined(transaction, doctors):
    async with transaction() as session:
        assert await search_doctors(session, "cardio", speciality="Neurologist") == []
        results = await search_doctors(session, "sunrise", speciality="neurologist")
    assert [d.id for d in results] == [doctors["neuro"].id]


async def test_speciality_filter_is_exact(transaction, doctors):
    async with transaction() as session:
        assert await search_doctors(session, speciality="Neuro") == []
        results = await search_doctors(session, speciality="NEUROLOGIST")
    assert [d.id for d in results] == [doctors["neuro"].id]


async def test_no_filters_returns_everyone(transaction, doctors):
    async with transaction() as session:
        results = await search_doctors(session)
    assert len(results) == 3


async def test_like_wildcards_are_literal(transaction, doctors):
    async with transaction() as session:
        assert await search_doctors(session, "%") == []
        assert await search_doctors(session, "_") == []


async def test_pagination(transaction, doctors):
    async with transaction() as session:
        first = await search_doctors(session, limit=2)
        rest = await search_doctors(session, limit=2, offset=2)
    assert len(first) == 2
    assert len(rest) == 1


async def test_search_endpoint_excludes_sensitive_fields(client, doctors):
    resp = await client.get("/api/v1/doctors/search", params={"q": "city hospital"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert len(body["doctors"]) == 2
    for doctor in body["doctors"]:
        assert "email" not in doctor
        assert "hashed_password" not in doctor


async def test_search_endpoint_accepts_legacy_params(client, doctors):
    resp = await client.get("/api/v1/doctors/search", params={"hospitalName": "sunrise"})
    assert [d["id"] for d in resp.json()["doctors"]] == [doctors["neuro"].id]


async def test_list_endpoint(client, doctors):
    resp = await client.get("/api/v1/doctors")
    assert resp.status_code == 200
    listed = resp.json()["doctors"]
    assert len(listed) == 3
    assert all("hashed_password" not in d and "email" not in d for d in listed)
