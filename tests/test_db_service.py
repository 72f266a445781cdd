import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from postgrest.exceptions import APIError

from app.core.config import StoreConfig
from app.core.errors import SlotUnavailable, StoreUnavailable
from app.services.db_service import SlotStoreClient


def make_response(data):
    response = MagicMock()
    response.data = data
    return response


def make_client(*responses, error=None):
    """Supabase client mock where every query builder call chains to the same object."""
    query = MagicMock()
    for method in ("select", "eq", "order", "range", "insert"):
        getattr(query, method).return_value = query
    query.execute = AsyncMock(side_effect=error) if error else AsyncMock(side_effect=list(responses))

    client = MagicMock()
    client.table.return_value = query
    return client, query


def make_store(client, page_size=2):
    config = StoreConfig(url="https://example.supabase.co", key="key", page_size=page_size)
    return SlotStoreClient(config, client=client)


@pytest.mark.asyncio
async def test_list_doctors_drains_pages():
    client, query = make_client(
        make_response([{"id": 1, "name": "Dr. Ahmed Khan", "specialty": "General Dentistry"},
                       {"id": 2, "name": "Dr. Sara Malik", "specialty": "Cosmetic Dentistry"}]),
        make_response([{"id": 3, "name": "Dr. Bilal Hussain"}]),
    )
    doctors = await make_store(client).list_doctors()

    assert [d.name for d in doctors] == ["Dr. Ahmed Khan", "Dr. Sara Malik", "Dr. Bilal Hussain"]
    assert doctors[2].specialty == "General Dentistry"
    assert doctors[0].id == "1"
    client.table.assert_called_with("doctors")
    assert [c.args for c in query.range.call_args_list] == [(0, 1), (2, 3)]


@pytest.mark.asyncio
async def test_list_appointments_filters_exact_day():
    client, query = make_client(make_response([
        {"id": 7, "patient_name": "John", "doctor": "Dr. Ahmed Khan", "date": "2026-03-02", "time": "10:00 AM"},
    ]))
    appointments = await make_store(client).list_appointments("2026-03-02")

    query.eq.assert_called_once_with("date", "2026-03-02")
    assert appointments[0].time == "10:00 AM"
    # Missing status reads as Confirmed
    assert appointments[0].status == "Confirmed"


@pytest.mark.asyncio
async def test_read_failure_raises_store_unavailable():
    client, _ = make_client(error=ConnectionError("timeout"))
    with pytest.raises(StoreUnavailable):
        await make_store(client).list_appointments("2026-03-02")


@pytest.mark.asyncio
async def test_create_appointment_inserts_confirmed_record():
    client, query = make_client(make_response([
        {"id": 9, "patient_name": "Jane", "patient_phone": "Not provided", "doctor": "Sara",
         "date": "2026-03-02", "time": "10:00 AM", "status": "Confirmed"},
    ]))
    appt = await make_store(client).create_appointment("Jane", None, "Sara", "2026-03-02", "10:00 AM")

    query.insert.assert_called_once_with({
        "patient_name": "Jane",
        "patient_phone": "Not provided",
        "doctor": "Sara",
        "date": "2026-03-02",
        "time": "10:00 AM",
        "status": "Confirmed",
    })
    assert appt.id == "9"


@pytest.mark.asyncio
async def test_unique_violation_becomes_slot_unavailable():
    client, _ = make_client(error=APIError({"code": "23505", "message": "duplicate key value"}))
    with pytest.raises(SlotUnavailable):
        await make_store(client).create_appointment("Jane", None, "Sara", "2026-03-02", "10:00 AM")


@pytest.mark.asyncio
async def test_other_api_error_becomes_store_unavailable():
    client, _ = make_client(error=APIError({"code": "42P01", "message": "relation does not exist"}))
    with pytest.raises(StoreUnavailable):
        await make_store(client).create_appointment("Jane", None, "Sara", "2026-03-02", "10:00 AM")


@pytest.mark.asyncio
async def test_missing_credentials():
    store = SlotStoreClient(StoreConfig(url="", key=""))
    with pytest.raises(StoreUnavailable):
        await store.list_doctors()


@pytest.mark.asyncio
async def test_concurrent_first_calls_share_one_client():
    created = MagicMock()

    async def slow_create(url, key):
        await asyncio.sleep(0.01)
        return created

    store = SlotStoreClient(StoreConfig(url="https://example.supabase.co", key="key"))
    with patch("app.services.db_service.create_async_client", side_effect=slow_create) as mock_create:
        clients = await asyncio.gather(*(store.get_client() for _ in range(5)))

    assert all(c is created for c in clients)
    mock_create.assert_called_once()
