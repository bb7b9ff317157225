"""
Audit trail tests.
"""

import pytest

from billbook.app.models.audit_log import AuditLog
from billbook.app.services.audit import AuditAction


@pytest.mark.asyncio
async def test_mutations_are_audited(client, alice, rows):
    response = await client.post("/v1/clients", json={"display_name": "Acme"}, headers=alice)
    client_id = response.json()["client"]["id"]
    await client.patch(f"/v1/clients/{client_id}", json={"phone": "555"}, headers=alice)
    await client.delete(f"/v1/clients/{client_id}", headers=alice)

    events = await rows(AuditLog, entity_id=client_id)
    assert sorted(e.action for e in events) == sorted([
        AuditAction.CLIENT_CREATED,
        AuditAction.CLIENT_UPDATED,
        AuditAction.CLIENT_DELETED,
    ])
    assert {e.actor_id for e in events} == {"user-alice"}
    assert {e.entity_type for e in events} == {"client"}


@pytest.mark.asyncio
async def test_failed_mutation_is_not_audited(client, bob, rows):
    response = await client.delete("/v1/invoices/missing", headers=bob)
    assert response.status_code == 404
    assert await rows(AuditLog) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"unknown_field": "x"}])
async def test_noop_update_is_not_audited(client, alice, rows, payload):
    response = await client.post("/v1/clients", json={"display_name": "Acme"}, headers=alice)
    client_id = response.json()["client"]["id"]

    response = await client.patch(f"/v1/clients/{client_id}", json=payload, headers=alice)
    assert response.status_code == 200
    events = await rows(AuditLog, entity_id=client_id)
    assert [e.action for e in events] == [AuditAction.CLIENT_CREATED]


@pytest.mark.asyncio
async def test_same_value_update_is_audited(client, alice, rows):
    response = await client.post("/v1/clients", json={"display_name": "Acme"}, headers=alice)
    client_id = response.json()["client"]["id"]

    await client.patch(f"/v1/clients/{client_id}", json={"display_name": "Acme"}, headers=alice)
    events = await rows(AuditLog, entity_id=client_id, action=AuditAction.CLIENT_UPDATED)
    assert len(events) == 1
    assert events[0].meta_data == {"fields": ["display_name"]}


@pytest.mark.asyncio
async def test_audit_trail_is_private(client, alice, bob):
    response = await client.post("/v1/clients", json={"display_name": "Acme"}, headers=alice)
    client_id = response.json()["client"]["id"]

    response = await client.get("/v1/audit", headers=alice)
    assert response.status_code == 200
    events = response.json()["events"]
    assert len(events) == 1
    assert events[0]["action"] == AuditAction.CLIENT_CREATED
    assert events[0]["entity_id"] == client_id

    response = await client.get("/v1/audit", headers=bob)
    assert response.json() == {"events": []}


@pytest.mark.asyncio
async def test_audit_trail_filters(client, alice):
    first = (await client.post("/v1/clients", json={"display_name": "A"}, headers=alice)).json()["client"]
    await client.post("/v1/clients", json={"display_name": "B"}, headers=alice)
    await client.patch(f"/v1/clients/{first['id']}", json={"notes": "x"}, headers=alice)

    response = await client.get("/v1/audit", params={"entity_id": first["id"]}, headers=alice)
    assert len(response.json()["events"]) == 2

    response = await client.get(
        "/v1/audit", params={"action": AuditAction.CLIENT_UPDATED}, headers=alice
    )
    assert [e["entity_id"] for e in response.json()["events"]] == [first["id"]]


@pytest.mark.asyncio
async def test_audit_trail_requires_identity(client):
    response = await client.get("/v1/audit")
    assert response.status_code == 401
