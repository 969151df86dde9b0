"""Pytest configuration and shared fixtures for Ward Handover backend tests.

This module provides fixtures for both storage backends (a temporary SQLite
file and a temporary JSON key-value file), an API app wired to either of
them, and sample request payloads.
"""

from collections.abc import AsyncGenerator
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ward_handover.api.v1.deps import get_storage
from ward_handover.api.v1.router import api_router
from ward_handover.models.base import Base, utcnow
from ward_handover.services.storage import (
    JsonKeyValueStore,
    Storage,
    create_local_storage,
    create_sql_storage,
)

BACKENDS = ["sql", "local"]


@pytest.fixture
async def session_maker(tmp_path: Path) -> AsyncGenerator[async_sessionmaker, None]:
    """Session factory over a fresh SQLite file."""
    db_file = tmp_path / "handover.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture
async def kv_store(tmp_path: Path) -> JsonKeyValueStore:
    """Key-value file in a temporary directory."""
    store = JsonKeyValueStore(tmp_path / "local" / "handover_storage.json")
    await store.initialize()
    return store


@pytest.fixture(params=BACKENDS)
async def storage(
    request: pytest.FixtureRequest,
    session_maker: async_sessionmaker,
    kv_store: JsonKeyValueStore,
) -> AsyncGenerator[Storage, None]:
    """The three stores of each backend in turn."""
    if request.param == "local":
        yield create_local_storage(kv_store)
        return

    async with session_maker() as session:
        yield create_sql_storage(session)


@pytest.fixture(params=BACKENDS)
def handover_app(
    request: pytest.FixtureRequest,
    session_maker: async_sessionmaker,
    kv_store: JsonKeyValueStore,
) -> FastAPI:
    """API app with storage overridden to a temporary backend."""
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")

    if request.param == "local":
        async def override_get_storage():
            yield create_local_storage(kv_store)

    else:
        async def override_get_storage():
            async with session_maker() as session:
                yield create_sql_storage(session)

    app.dependency_overrides[get_storage] = override_get_storage
    return app


@pytest.fixture
async def client(handover_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=handover_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def patient_payload() -> dict[str, Any]:
    """A valid new-patient request body."""
    return {
        "nhsNumber": "943 476 5919",
        "firstName": "Edith",
        "lastName": "Crawley",
        "dateOfBirth": "1942-06-01",
        "ward": "Ward 3",
        "bedNumber": "12B",
        "consultant": "Dr. Patel",
        "admissionDate": "2025-01-10",
        "diagnosis": "Community acquired pneumonia",
        "allergies": "Penicillin",
        "resuscitationStatus": "DNACPR",
        "earlyWarningScore": 6,
    }


@pytest.fixture
def handover_payload() -> dict[str, Any]:
    """SBAR note body without patientId."""
    return {
        "createdBy": "Nurse Adams",
        "shiftDate": utcnow().date().isoformat(),
        "shiftType": "Night",
        "situation": "Increasing oxygen requirement overnight.",
        "background": "Admitted two days ago with pneumonia.",
        "assessment": "SpO2 91% on 4L, RR 24, NEWS 6.",
        "recommendation": "Medical review, repeat ABG, chase sputum culture.",
    }


@pytest.fixture
def review_payload() -> dict[str, Any]:
    """Hospital at Night entry body without patientId."""
    today = utcnow().date()
    return {
        "reviewDates": [
            {"date": (today - timedelta(days=1)).isoformat()},
            {"date": (today + timedelta(days=1)).isoformat()},
        ],
        "priority": "High",
        "assignedRoles": ["SpR", "SHO"],
        "reasonForReview": "NEWS 6, escalate if not improving.",
        "specialty": "Medicine",
        "createdBy": "Nurse Adams",
    }


@pytest.fixture
async def patient_id(client: AsyncClient, patient_payload: dict[str, Any]) -> str:
    """Id of a patient created through the API."""
    response = await client.post("/api/v1/patients", json=patient_payload)
    assert response.status_code == 201
    return response.json()["id"]
