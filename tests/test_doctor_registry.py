"""Doctor registry: create, update, availability, slots, public projection."""
import logging
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.core.timezone import utc_naive_now
from app.services import doctor_service
from app.services.doctor_service import (
    add_slots,
    create_doctor,
    get_doctor,
    list_doctors,
    list_slots,
    toggle_availability,
    update_profile,
)


@pytest.mark.parametrize(
    "fields",
    [
        {"specialty": "Cardiologist"},
        {"name": "   ", "specialty": "Cardiologist"},
        {"name": "Dr. Rao"},
        {"name": "Dr. Rao", "specialty": "Cardiologist", "experience_years": -1},
        {"name": "Dr. Rao", "specialty": "Cardiologist", "consultation_fee": -10},
    ],
)
async def test_create_doctor_rejects_invalid_fields(transaction, fields):
    with pytest.raises(ValidationError):
        async with transaction() as session:
            await create_doctor(session, fields)


async def test_create_doctor_collapses_duplicate_slots(make_doctor, transaction, future_slot):
    slot = future_slot()
    doctor = await make_doctor(slots=[slot, slot, future_slot(hour=10)])

    async with transaction() as session:
        slots = await list_slots(session, doctor.id)

    assert [s.slot_at for s in slots] == [slot, future_slot(hour=10)]
    assert not any(s.booked for s in slots)


async def test_offset_instants_are_stored_as_naive_utc(make_doctor, transaction):
    ist = timezone(timedelta(hours=5, minutes=30))
    doctor = await make_doctor(slots=[datetime(2030, 1, 15, 14, 30, tzinfo=ist)])

    async with transaction() as session:
        slots = await list_slots(session, doctor.id)
        stored = await get_doctor(session, doctor.id)

    assert [s.slot_at for s in slots] == [datetime(2030, 1, 15, 9, 0)]
    assert slots[0].slot_at.tzinfo is None
    assert stored.created_at.tzinfo is None
    assert stored.created_at <= utc_naive_now()


async def test_create_doctor_rejects_duplicate_email(make_doctor):
    await make_doctor(email="asha@sunrise-clinic.in", password="secret123")
    with pytest.raises(ValidationError):
        await make_doctor(name="Dr. Other", email="ASHA@sunrise-clinic.in", password="secret123")


async def test_duplicate_email_missed_by_lookup_is_validation_error(make_doctor, monkeypatch):
    await make_doctor(email="asha@sunrise-clinic.in", password="secret123")

    async def no_match(session, email):
        return None

    monkeypatch.setattr(doctor_service, "get_doctor_by_email", no_match)
    with pytest.raises(ValidationError):
        await make_doctor(name="Dr. Other", email="asha@sunrise-clinic.in", password="secret123")


async def test_duplicate_slot_missed_by_lookup_is_validation_error(make_doctor, transaction, future_slot, monkeypatch):
    doctor = await make_doctor(slots=[future_slot(hour=9)])

    async def nothing_existing(session, doctor_id, instants):
        return set()

    monkeypatch.setattr(doctor_service, "_existing_instants", nothing_existing)
    with pytest.raises(ValidationError):
        async with transaction() as session:
            await add_slots(session, doctor.id, [future_slot(hour=9)])

    async with transaction() as session:
        assert len(await list_slots(session, doctor.id)) == 1


async def test_update_profile_applies_known_fields_and_ignores_unknown(make_doctor, transaction):
    doctor = await make_doctor()

    async with transaction() as session:
        await update_profile(
            session,
            doctor.id,
            {"hospital_name": "Apollo", "consultation_fee": 750, "favourite_colour": "blue", "hashed_password": "x"},
        )

    async with transaction() as session:
        updated = await get_doctor(session, doctor.id)
    assert updated.hospital_name == "Apollo"
    assert updated.consultation_fee == 750
    assert updated.hashed_password is None
    assert not hasattr(updated, "favourite_colour")


async def test_update_profile_validates_values(make_doctor, transaction):
    doctor = await make_doctor()
    with pytest.raises(ValidationError):
        async with transaction() as session:
            await update_profile(session, doctor.id, {"consultation_fee": -1})
    with pytest.raises(ValidationError):
        async with transaction() as session:
            await update_profile(session, doctor.id, {"name": ""})


async def test_update_profile_unknown_doctor(transaction):
    with pytest.raises(NotFoundError):
        async with transaction() as session:
            await update_profile(session, 999, {"hospital_name": "Apollo"})


async def test_toggle_availability_flips_state(make_doctor, transaction):
    doctor = await make_doctor()

    async with transaction() as session:
        assert await toggle_availability(session, doctor.id) is False
    async with transaction() as session:
        assert await toggle_availability(session, doctor.id) is True


async def test_toggle_availability_unknown_doctor(transaction):
    with pytest.raises(NotFoundError):
        async with transaction() as session:
            await toggle_availability(session, 12345)


async def test_add_slots_skips_existing_instants(make_doctor, transaction, future_slot):
    doctor = await make_doctor(slots=[future_slot(hour=9)])

    async with transaction() as session:
        added = await add_slots(session, doctor.id, [future_slot(hour=9), future_slot(hour=11)])
    assert [s.slot_at for s in added] == [future_slot(hour=11)]

    async with transaction() as session:
        slots = await list_slots(session, doctor.id)
    assert len(slots) == 2


async def test_add_slots_endpoint_logs_and_returns_utc_instants(client, make_doctor, future_slot, caplog):
    doctor = await make_doctor(slots=[future_slot(hour=9)])
    caplog.set_level(logging.INFO)

    resp = await client.post(
        f"/api/v1/doctors/{doctor.id}/slots",
        json={"slots": [future_slot(hour=9).isoformat() + "Z", future_slot(hour=11).isoformat() + "Z"]},
    )

    assert resp.status_code == 201
    assert [s["slot"] for s in resp.json()["added"]] == [future_slot(hour=11).isoformat() + "Z"]
    assert f"Added 1 of 2 requested slot(s) to doctor {doctor.id}" in caplog.text


async def test_list_doctors_never_exposes_credentials(make_doctor, transaction):
    await make_doctor(email="asha@sunrise-clinic.in", password="secret123", profile_image="https://cdn.test/a.png")

    async with transaction() as session:
        doctors = await list_doctors(session)
        with_contact = await list_doctors(session, exclude_sensitive=False)

    dumped = doctors[0].model_dump()
    assert "hashed_password" not in dumped
    assert "email" not in dumped
    assert dumped["profile_image"] == "https://cdn.test/a.png"
    assert with_contact[0].model_dump()["email"] == "asha@sunrise-clinic.in"
    assert "hashed_password" not in with_contact[0].model_dump()


async def test_register_doctor_endpoint(client, future_slot):
    slot = future_slot()
    resp = await client.post(
        "/api/v1/doctors",
        json={
            "name": "Dr. Meera Iyer",
            "specialty": "Neurologist",
            "hospital_name": "Sunrise Clinic",
            "consultation_fee": 300,
            "email": "meera@sunrise-clinic.in",
            "password": "neuro123",
            "slots": [slot.isoformat()],
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["doctor"]["name"] == "Dr. Meera Iyer"
    assert len(body["doctor"]["slots"]) == 1
    assert "email" not in body["doctor"]
    assert "hashed_password" not in body["doctor"]


async def test_register_doctor_rejects_legacy_field_names(client):
    resp = await client.post(
        "/api/v1/doctors",
        json={"doctorName": "Dr. Legacy", "speciality": "Cardiologist"},
    )
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "validation_error"


async def test_register_doctor_rejects_negative_fee(client):
    resp = await client.post(
        "/api/v1/doctors",
        json={"name": "Dr. Rao", "specialty": "Cardiologist", "consultation_fee": -5},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


async def test_get_unknown_doctor_returns_not_found(client):
    resp = await client.get("/api/v1/doctors/404")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "code": "not_found", "message": "Doctor not found"}


async def test_patch_and_toggle_endpoints(client, make_doctor):
    doctor = await make_doctor()

    resp = await client.patch(f"/api/v1/doctors/{doctor.id}", json={"hospital_location": "Mysuru", "unknown": 1})
    assert resp.status_code == 200
    assert resp.json()["doctor"]["hospital_location"] == "Mysuru"

    resp = await client.post(f"/api/v1/doctors/{doctor.id}/availability")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "available": False, "message": "Availability changed"}


async def test_rating_is_stored(client, make_doctor):
    doctor = await make_doctor()

    resp = await client.post(
        f"/api/v1/doctors/{doctor.id}/ratings",
        json={"patientId": "patient-1", "score": 5, "comment": "Very thorough"},
    )
    assert resp.status_code == 201
    rating = resp.json()["rating"]
    assert rating["doctor_id"] == doctor.id
    assert rating["score"] == 5

    resp = await client.post(f"/api/v1/doctors/{doctor.id}/ratings", json={"patient_id": "p", "score": 9})
    assert resp.status_code == 422
