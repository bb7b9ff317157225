"""
Integration tests for invoices.

Covers the client reference checks, detaching a client and the invoice
delete policies.
"""

import pytest

from billbook.app.core.exceptions import ConflictError, ResourceNotFoundError
from billbook.app.db.store import SqlAlchemyStore
from billbook.app.domain.records.service import RecordsService
from billbook.app.models.invoice import Invoice
from billbook.app.models.invoice_item import InvoiceItem
from billbook.app.models.receipt import Receipt


async def create_client(client, headers, name="Acme"):
    response = await client.post("/v1/clients", json={"display_name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()["client"]


async def create_invoice(client, headers, **data):
    payload = {"invoice_number": "INV-1"}
    payload.update(data)
    response = await client.post("/v1/invoices", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["invoice"]


# TEST 1: Scenario B
@pytest.mark.asyncio
async def test_invoice_with_own_client(client, alice):
    acme = await create_client(client, alice)

    invoice = await create_invoice(
        client, alice,
        client_id=acme["id"],
        issue_date="2024-03-01",
        due_date="2024-03-31",
        currency="AED",
        sub_total=100,
        tax_amount=5,
        discount_amount=0,
        total_amount=999,
        status="draft",
    )
    assert invoice["client_id"] == acme["id"]
    assert invoice["owner_id"] == "user-alice"
    assert invoice["issue_date"] == "2024-03-01"
    # amounts are stored as given, never recomputed
    assert invoice["total_amount"] == 999


@pytest.mark.asyncio
async def test_invoice_with_foreign_client_is_rejected(client, alice, bob, rows):
    acme = await create_client(client, alice)

    response = await client.post(
        "/v1/invoices",
        json={"invoice_number": "INV-1", "client_id": acme["id"]},
        headers=bob,
    )
    assert response.status_code == 404
    assert response.json()["details"]["resource"] == "Client"
    assert await rows(Invoice) == []


@pytest.mark.asyncio
async def test_invoice_with_unknown_client_is_rejected(client, alice, rows):
    response = await client.post(
        "/v1/invoices",
        json={"invoice_number": "INV-1", "client_id": "nope"},
        headers=alice,
    )
    assert response.status_code == 404
    assert await rows(Invoice) == []


@pytest.mark.asyncio
async def test_invoice_with_empty_client_id_is_standalone(client, alice):
    invoice = await create_invoice(client, alice, client_id="")
    assert invoice["client_id"] is None


@pytest.mark.asyncio
async def test_invoice_number_is_required(client, alice, rows):
    response = await client.post("/v1/invoices", json={"invoice_number": ""}, headers=alice)
    assert response.status_code == 422
    assert await rows(Invoice) == []


@pytest.mark.asyncio
async def test_invoice_with_blank_client_id_is_rejected(client, alice, rows):
    """Only "" and null detach; whitespace is an id that must resolve."""
    response = await client.post(
        "/v1/invoices", json={"invoice_number": "INV-1", "client_id": "   "}, headers=alice
    )
    assert response.status_code == 404
    assert response.json()["details"]["resource"] == "Client"
    assert await rows(Invoice) == []


@pytest.mark.asyncio
async def test_update_to_blank_client_id_is_rejected(client, alice, rows):
    acme = await create_client(client, alice)
    invoice = await create_invoice(client, alice, client_id=acme["id"])

    response = await client.patch(
        f"/v1/invoices/{invoice['id']}", json={"client_id": "   "}, headers=alice
    )
    assert response.status_code == 404
    assert (await rows(Invoice, id=invoice["id"]))[0].client_id == acme["id"]


# TEST 2: Updating references
@pytest.mark.asyncio
async def test_update_to_foreign_client_is_rejected(client, alice, bob, rows):
    own = await create_client(client, alice)
    foreign = await create_client(client, bob, name="Bob Co")
    invoice = await create_invoice(client, alice, client_id=own["id"])

    response = await client.patch(
        f"/v1/invoices/{invoice['id']}",
        json={"client_id": foreign["id"], "notes": "moved"},
        headers=alice,
    )
    assert response.status_code == 404

    stored = (await rows(Invoice, id=invoice["id"]))[0]
    assert stored.client_id == own["id"]
    assert stored.notes is None


@pytest.mark.asyncio
async def test_update_to_another_own_client(client, alice):
    first = await create_client(client, alice)
    second = await create_client(client, alice, name="Beta")
    invoice = await create_invoice(client, alice, client_id=first["id"])

    response = await client.patch(
        f"/v1/invoices/{invoice['id']}", json={"client_id": second["id"]}, headers=alice
    )
    assert response.status_code == 200
    assert response.json()["invoice"]["client_id"] == second["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("detached", ["", None])
async def test_detach_client(client, alice, detached):
    acme = await create_client(client, alice)
    invoice = await create_invoice(client, alice, client_id=acme["id"])

    response = await client.patch(
        f"/v1/invoices/{invoice['id']}", json={"client_id": detached}, headers=alice
    )
    assert response.status_code == 200
    assert response.json()["invoice"]["client_id"] is None


@pytest.mark.asyncio
async def test_omitted_client_id_is_left_alone(client, alice):
    acme = await create_client(client, alice)
    invoice = await create_invoice(client, alice, client_id=acme["id"])

    response = await client.patch(
        f"/v1/invoices/{invoice['id']}", json={"status": "sent"}, headers=alice
    )
    assert response.status_code == 200
    assert response.json()["invoice"]["client_id"] == acme["id"]
    assert response.json()["invoice"]["status"] == "sent"


@pytest.mark.asyncio
async def test_detach_performs_no_lookup(service, alice_ctx, mocker):
    acme = await service.create_client(alice_ctx, {"display_name": "Acme"})
    invoice = await service.create_invoice(alice_ctx, {"invoice_number": "INV-1", "client_id": acme.id})

    check = mocker.spy(service.references, "check_reference")
    updated = await service.update_invoice(alice_ctx, invoice.id, {"client_id": ""})

    assert updated.client_id is None
    check.assert_not_called()


@pytest.mark.asyncio
async def test_detach_survives_deleted_client(service, alice_ctx):
    """A dangling client id can still be cleared."""
    acme = await service.create_client(alice_ctx, {"display_name": "Acme"})
    invoice = await service.create_invoice(alice_ctx, {"invoice_number": "INV-1", "client_id": acme.id})
    await service.delete_client(alice_ctx, acme.id)

    updated = await service.update_invoice(alice_ctx, invoice.id, {"client_id": None})
    assert updated.client_id is None


# TEST 3: Delete policies
async def seed_invoice_with_dependents(service, ctx):
    invoice = await service.create_invoice(ctx, {"invoice_number": "INV-1"})
    item = await service.save_invoice_item(ctx, {"invoice_id": invoice.id, "description": "Widget"})
    receipt = await service.create_receipt(
        ctx, {"receipt_number": "R-1", "amount_paid": 10, "invoice_id": invoice.id}
    )
    return invoice, item, receipt


@pytest.mark.asyncio
async def test_delete_policy_orphan_keeps_dependents(session_factory, alice_ctx, rows):
    async with session_factory() as session:
        service = RecordsService(SqlAlchemyStore(session), invoice_delete_policy="orphan")
        invoice, item, receipt = await seed_invoice_with_dependents(service, alice_ctx)

        deleted = await service.delete_invoice(alice_ctx, invoice.id)
        assert deleted.id == invoice.id

    assert await rows(Invoice) == []
    assert (await rows(InvoiceItem, id=item.id))[0].invoice_id == invoice.id
    assert (await rows(Receipt, id=receipt.id))[0].invoice_id == invoice.id


@pytest.mark.asyncio
async def test_delete_policy_cascade(session_factory, alice_ctx, rows):
    async with session_factory() as session:
        service = RecordsService(SqlAlchemyStore(session), invoice_delete_policy="cascade")
        invoice, item, receipt = await seed_invoice_with_dependents(service, alice_ctx)

        await service.delete_invoice(alice_ctx, invoice.id)

    assert await rows(Invoice) == []
    assert await rows(InvoiceItem) == []
    assert (await rows(Receipt, id=receipt.id))[0].invoice_id is None


@pytest.mark.asyncio
async def test_delete_policy_restrict(session_factory, alice_ctx, rows):
    async with session_factory() as session:
        service = RecordsService(SqlAlchemyStore(session), invoice_delete_policy="restrict")
        invoice, item, receipt = await seed_invoice_with_dependents(service, alice_ctx)
        # a refused delete rolls back and expires loaded instances
        invoice_id, item_id, receipt_id = invoice.id, item.id, receipt.id

        with pytest.raises(ConflictError) as exc_info:
            await service.delete_invoice(alice_ctx, invoice_id)
        assert exc_info.value.details == {"items": 1, "receipts": 1}

        await service.delete_invoice_item(alice_ctx, {"id": item_id, "invoice_id": invoice_id})
        await service.delete_receipt(alice_ctx, receipt_id)
        await service.delete_invoice(alice_ctx, invoice_id)

    assert await rows(Invoice) == []


@pytest.mark.asyncio
async def test_delete_foreign_invoice(service, alice_ctx, bob_ctx, rows):
    invoice = await service.create_invoice(alice_ctx, {"invoice_number": "INV-1"})
    invoice_id = invoice.id

    with pytest.raises(ResourceNotFoundError):
        await service.delete_invoice(bob_ctx, invoice_id)
    assert len(await rows(Invoice)) == 1


@pytest.mark.asyncio
async def test_list_invoices_is_owner_scoped(client, alice, bob):
    await create_invoice(client, alice, invoice_number="A-1")
    await create_invoice(client, alice, invoice_number="A-2")
    await create_invoice(client, bob, invoice_number="B-1")

    response = await client.get("/v1/invoices", headers=alice)
    assert response.status_code == 200
    numbers = sorted(i["invoice_number"] for i in response.json()["invoices"])
    assert numbers == ["A-1", "A-2"]


@pytest.mark.asyncio
async def test_get_invoice(client, alice, bob):
    invoice = await create_invoice(client, alice, notes="net 30")

    response = await client.get(f"/v1/invoices/{invoice['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json()["invoice"] == invoice

    response = await client.get(f"/v1/invoices/{invoice['id']}", headers=bob)
    assert response.status_code == 404
