# tests/test_db_routes.py
"""
Routes and DAO helpers against a throwaway SQLite file (aiosqlite).
Each test gets fresh tables through `services.db.create_all`.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from core.engine import LOW_ENERGY_REC
from main import app
from services import db
from services.db import DietPlan

BASE = "/api/v1"
ANSWERS = {"1": "vata", "2": "vata", "3": "pitta", "4": "vata", "5": "pitta", "6": "vata", "7": "pitta", "8": "vata"}


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sqlite_db(tmp_path):
    # NullPool: TestClient runs the app on its own event loop
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'plans.db'}", poolclass=NullPool)
    db._ENGINE = eng
    asyncio.run(db.create_all())
    yield eng
    asyncio.run(eng.dispose())
    db._ENGINE = None


@pytest.fixture
def client(sqlite_db):
    return TestClient(app)


@pytest.fixture
def clinic(client):
    """Two doctors, one patient linked to the first, one submitted assessment."""
    d1 = client.post(f"{BASE}/doctors", json={"name": "Dr. Nair", "email": "nair@example.com"}).json()
    d2 = client.post(f"{BASE}/doctors", json={"name": "Dr. Rao", "email": "rao@example.com"}).json()
    pt = client.post(f"{BASE}/patients", json={"name": "Asha", "email": "asha@example.com", "age": 34}).json()

    r = client.post(
        f"{BASE}/patients/{pt['id']}/doctor",
        json={"doctor_id": d1["id"]},
        headers=_auth(pt["access_token"]),
    )
    assert r.status_code == 200

    r = client.post(
        f"{BASE}/assessments",
        json={"patient_id": pt["id"], "mode": "basic", "answers": ANSWERS},
        headers=_auth(pt["access_token"]),
    )
    assert r.status_code == 201
    return {"d1": d1, "d2": d2, "patient": pt, "plan_id": r.json()["diet_plan_id"]}


# ── accounts ─────────────────────────────────────────────────────────
def test_create_patient_conflicts_on_email(client):
    body = {"name": "Asha", "email": "asha@example.com"}
    first = client.post(f"{BASE}/patients", json=body)
    assert first.status_code == 201
    assert first.json()["has_completed_assessment"] is False
    assert first.json()["access_token"]

    assert client.post(f"{BASE}/patients", json=body).status_code == 409


def test_create_doctor_conflicts_on_email(client):
    body = {"name": "Dr. Nair", "email": "nair@example.com", "specialization": "Kayachikitsa"}
    assert client.post(f"{BASE}/doctors", json=body).status_code == 201
    assert client.post(f"{BASE}/doctors", json=body).status_code == 409


def test_doctor_directory(clinic, client):
    r = client.get(f"{BASE}/doctors", headers=_auth(clinic["patient"]["access_token"]))
    assert r.status_code == 200
    assert [d["name"] for d in r.json()] == ["Dr. Nair", "Dr. Rao"]
    assert client.get(f"{BASE}/doctors").status_code == 401


def test_fetch_patient_after_assessment(clinic, client):
    pt = clinic["patient"]
    r = client.get(f"{BASE}/patients/{pt['id']}", headers=_auth(pt["access_token"]))
    assert r.status_code == 200
    body = r.json()
    assert body["doctor_id"] == clinic["d1"]["id"]
    assert body["has_completed_assessment"] is True
    assert body["constitution"] == "vata-dominant"


def test_patient_cannot_fetch_someone_else(clinic, client):
    other = client.post(f"{BASE}/patients", json={"name": "Ravi"}).json()
    r = client.get(f"{BASE}/patients/{clinic['patient']['id']}", headers=_auth(other["access_token"]))
    assert r.status_code == 403


def test_missing_patient_is_404(clinic, client):
    r = client.get(f"{BASE}/patients/999", headers=_auth(clinic["d1"]["access_token"]))
    assert r.status_code == 404


def test_assessment_history(clinic, client):
    pt = clinic["patient"]
    r = client.get(f"{BASE}/patients/{pt['id']}/assessments", headers=_auth(clinic["d1"]["access_token"]))
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 1
    assert rows[0]["scores"] == {"vata": 10, "pitta": 6, "kapha": 0}
    assert rows[0]["dominant"] == "vata"


# ── doctor access ────────────────────────────────────────────────────
def test_unlinked_doctor_is_forbidden(clinic, client):
    pid, plan_id = clinic["patient"]["id"], clinic["plan_id"]
    outsider = _auth(clinic["d2"]["access_token"])

    assert client.get(f"{BASE}/patients/{pid}/diet-plan", headers=outsider).status_code == 403
    assert client.get(f"{BASE}/patients/{pid}", headers=outsider).status_code == 403
    assert client.get(f"{BASE}/patients/{pid}/progress/insights", headers=outsider).status_code == 403
    r = client.put(f"{BASE}/diet-plans/{plan_id}", json={"recommendations": ["hijacked"]}, headers=outsider)
    assert r.status_code == 403

    # the plan is untouched
    r = client.get(f"{BASE}/patients/{pid}/diet-plan", headers=_auth(clinic["d1"]["access_token"]))
    assert r.status_code == 200
    assert "hijacked" not in r.json()["document"]["recommendations"]


def test_doctor_cannot_link_themselves(clinic, client):
    r = client.post(
        f"{BASE}/patients/{clinic['patient']['id']}/doctor",
        json={"doctor_id": clinic["d2"]["id"]},
        headers=_auth(clinic["d2"]["access_token"]),
    )
    assert r.status_code == 403


def test_unlinking_revokes_access(clinic, client):
    pid, d1 = clinic["patient"]["id"], clinic["d1"]
    r = client.delete(f"{BASE}/patients/{pid}/doctor/{d1['id']}", headers=_auth(clinic["patient"]["access_token"]))
    assert r.status_code == 200
    assert r.json()["doctor_id"] is None
    assert client.get(f"{BASE}/patients/{pid}/diet-plan", headers=_auth(d1["access_token"])).status_code == 403


# ── doctor edits ─────────────────────────────────────────────────────
def test_doctor_edit_replaces_whole_lists(clinic, client):
    plan_id, d1 = clinic["plan_id"], clinic["d1"]
    before = client.get(
        f"{BASE}/patients/{clinic['patient']['id']}/diet-plan", headers=_auth(d1["access_token"])
    ).json()["document"]

    r = client.put(
        f"{BASE}/diet-plans/{plan_id}",
        json={
            "meals": {"dinner": ["Kitchari", "Steamed Zucchini"]},
            "recommendations": ["Walk for ten minutes after meals"],
            "doctor_notes": "Keep dinners light",
        },
        headers=_auth(d1["access_token"]),
    )
    assert r.status_code == 200
    body = r.json()
    doc = body["document"]
    assert doc["meals"]["dinner"]["items"] == ["Kitchari", "Steamed Zucchini"]
    assert doc["meals"]["dinner"]["by_category"] == {}
    assert doc["meals"]["lunch"] == before["meals"]["lunch"]
    assert doc["recommendations"] == ["Walk for ten minutes after meals"]
    assert body["doctor_notes"] == "Keep dinners light"
    assert body["edited_by"] == d1["id"]


def test_feedback_keeps_doctor_attribution(clinic, client):
    plan_id, d1 = clinic["plan_id"], clinic["d1"]
    client.put(
        f"{BASE}/diet-plans/{plan_id}",
        json={"recommendations": ["Eat at regular times"]},
        headers=_auth(d1["access_token"]),
    )
    r = client.post(
        f"{BASE}/diet-plans/{plan_id}/feedback",
        json={"energy_level": "low"},
        headers=_auth(clinic["patient"]["access_token"]),
    )
    assert r.status_code == 200
    assert r.json()["document"]["recommendations"] == ["Eat at regular times", LOW_ENERGY_REC]
    assert r.json()["edited_by"] == d1["id"]


# ── DAO ──────────────────────────────────────────────────────────────
def test_latest_plan_prefers_newest_then_highest_id(sqlite_db):
    earlier = datetime(2024, 3, 1, tzinfo=timezone.utc)
    later = datetime(2024, 3, 2, tzinfo=timezone.utc)

    async def _run():
        async with db.session_scope() as s:
            pt = await db.create_patient(s, name="Asha")
            assert await db.latest_diet_plan(s, pt.id) is None
            for n, created in ((1, later), (2, earlier), (3, later)):
                s.add(DietPlan(patient_id=pt.id, document={"n": n}, created_at=created))
                await s.flush()
            await s.commit()
            return (await db.latest_diet_plan(s, pt.id)).document

    assert asyncio.run(_run()) == {"n": 3}


def test_update_without_editor_keeps_previous_editor(sqlite_db):
    async def _run():
        async with db.session_scope() as s:
            doc = await db.create_doctor(s, name="Dr. Nair")
            pt = await db.create_patient(s, name="Asha")
            plan = await db.save_diet_plan(s, pt.id, {"v": 1})
            await db.update_diet_plan(s, plan.id, {"v": 2}, edited_by=doc.id)
            row = await db.update_diet_plan(s, plan.id, {"v": 3})
            return row.document, row.edited_by, doc.id

    document, edited_by, doctor_id = asyncio.run(_run())
    assert document == {"v": 3}
    assert edited_by == doctor_id
