"""Tests for the HTTP surface: status mapping, envelope, role gating."""

from datetime import timedelta

import httpx
import pytest

from orderflow._types import utcnow
from orderflow.api import GENERIC_FAILURE, VALIDATION_FAILURE, create_app
from orderflow.config import Settings


def headers(user, role: str | None = None) -> dict[str, str]:
    return {"X-User-Id": str(user.id), "X-User-Role": role or user.role.value}


@pytest.fixture
async def client(session_factory, sender):
    app = create_app(session_factory, settings=Settings(), notifier=sender)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://shop.test") as c:
        yield c


@pytest.fixture
async def placed(client, shop, seed):
    await seed.cart(shop.customer.id, (shop.widget, 2))
    response = await client.post(
        "/api/orders", json={"addressId": shop.address.id}, headers=headers(shop.customer)
    )
    assert response.status_code == 200
    return response.json()["data"]


class TestPlaceOrder:
    async def test_success_envelope(self, client, shop, seed, sender):
        await seed.cart(shop.customer.id, (shop.widget, 2))

        response = await client.post(
            "/api/orders", json={"addressId": shop.address.id}, headers=headers(shop.customer)
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["message"] == "Order placed successfully"
        assert body["errors"] is None
        assert body["data"]["totalAmount"] == 100.0
        assert body["data"]["status"] == "Pending"
        assert body["data"]["items"][0]["productName"] == "Widget"
        assert sender.kinds() == ["placed"]

    async def test_missing_identity(self, client, shop):
        response = await client.post("/api/orders", json={"addressId": shop.address.id})
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Invalid user context",
            "data": None,
            "errors": None,
        }

    async def test_malformed_user_id(self, client, shop):
        response = await client.post(
            "/api/orders",
            json={"addressId": shop.address.id},
            headers={"X-User-Id": "abc", "X-User-Role": "User"},
        )
        assert response.status_code == 401

    async def test_wrong_role(self, client, shop):
        response = await client.post(
            "/api/orders", json={"addressId": shop.address.id}, headers=headers(shop.seller_a)
        )
        assert response.status_code == 403
        assert response.json()["message"] == "You do not have access to this resource."

    async def test_role_header_is_case_insensitive(self, client, shop, seed):
        await seed.cart(shop.customer.id, (shop.gizmo, 1))
        response = await client.post(
            "/api/orders",
            json={"addressId": shop.address.id},
            headers=headers(shop.customer, role="user"),
        )
        assert response.status_code == 200

    async def test_empty_cart(self, client, shop):
        response = await client.post(
            "/api/orders", json={"addressId": shop.address.id}, headers=headers(shop.customer)
        )
        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert "cart is empty" in body["message"]

    async def test_validation_error(self, client, shop):
        response = await client.post(
            "/api/orders", json={"addressId": 0}, headers=headers(shop.customer)
        )
        body = response.json()
        assert response.status_code == 400
        assert body["message"] == VALIDATION_FAILURE
        assert len(body["errors"]) == 1
        assert body["errors"][0].startswith("addressId:")


class TestReadOrders:
    async def test_owner_reads_order(self, client, shop, placed):
        response = await client.get(f"/api/orders/{placed['id']}", headers=headers(shop.customer))
        assert response.status_code == 200
        assert response.json()["data"]["orderNumber"] == placed["orderNumber"]

    async def test_other_customer_gets_404(self, client, shop, placed):
        response = await client.get(
            f"/api/orders/{placed['id']}", headers=headers(shop.other_customer)
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"

    async def test_non_numeric_id_is_validation_error(self, client, shop):
        response = await client.get("/api/orders/abc", headers=headers(shop.customer))
        assert response.status_code == 400

    async def test_my_orders(self, client, shop, placed):
        response = await client.get("/api/orders/my-orders", headers=headers(shop.customer))
        data = response.json()["data"]
        assert response.status_code == 200
        assert [o["id"] for o in data] == [placed["id"]]

    async def test_my_orders_limit_validated(self, client, shop):
        response = await client.get(
            "/api/orders/my-orders", params={"limit": 0}, headers=headers(shop.customer)
        )
        assert response.status_code == 400
        assert response.json()["errors"][0].startswith("limit:")

    async def test_admin_pagination(self, client, shop, seed):
        for _ in range(3):
            await seed.cart(shop.customer.id, (shop.widget, 1))
            await client.post(
                "/api/orders", json={"addressId": shop.address.id}, headers=headers(shop.customer)
            )

        response = await client.get(
            "/api/orders/admin", params={"page": 2, "pageSize": 2}, headers=headers(shop.admin)
        )
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["page"] == 2
        assert data["pageSize"] == 2
        assert data["totalRecords"] == 3
        assert data["totalPages"] == 2
        assert len(data["items"]) == 1

    async def test_admin_list_refuses_customers(self, client, shop):
        response = await client.get("/api/orders/admin", headers=headers(shop.customer))
        assert response.status_code == 403

    async def test_seller_list_shows_own_slice(self, client, shop, placed):
        mine = await client.get("/api/orders/seller", headers=headers(shop.seller_a))
        theirs = await client.get("/api/orders/seller", headers=headers(shop.seller_b))

        assert mine.json()["data"]["totalRecords"] == 1
        assert mine.json()["data"]["items"][0]["totalAmount"] == 100.0
        assert theirs.json()["data"]["totalRecords"] == 0


class TestUpdateStatus:
    async def test_owning_seller_ships(self, client, shop, placed):
        response = await client.put(
            f"/api/orders/{placed['id']}/status",
            json={"status": "Shipped", "trackingNumber": "TRK-1"},
            headers=headers(shop.seller_a),
        )
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Order status updated"
        assert body["data"]["status"] == "Shipped"
        assert body["data"]["trackingNumber"] == "TRK-1"
        assert body["data"]["shippedDate"] is not None

    async def test_other_seller_forbidden(self, client, shop, placed):
        response = await client.put(
            f"/api/orders/{placed['id']}/status",
            json={"status": "Shipped"},
            headers=headers(shop.seller_b),
        )
        assert response.status_code == 403
        assert response.json()["message"] == "You do not have permission to update this order."

    async def test_customer_forbidden(self, client, shop, placed):
        response = await client.put(
            f"/api/orders/{placed['id']}/status",
            json={"status": "Cancelled"},
            headers=headers(shop.customer),
        )
        assert response.status_code == 403

    async def test_missing_order(self, client, shop):
        response = await client.put(
            "/api/orders/999/status", json={"status": "Shipped"}, headers=headers(shop.admin)
        )
        assert response.status_code == 404

    async def test_unknown_status(self, client, shop, placed):
        response = await client.put(
            f"/api/orders/{placed['id']}/status",
            json={"status": "Teleported"},
            headers=headers(shop.admin),
        )
        assert response.status_code == 400
        assert response.json()["message"] == VALIDATION_FAILURE


class TestReports:
    async def test_admin_report(self, client, shop, placed):
        today = utcnow().date()
        response = await client.get(
            "/api/reports/admin",
            params={"from": f"{today - timedelta(days=1)}T00:00:00", "to": f"{today}T00:00:00"},
            headers=headers(shop.admin),
        )
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["totalOrders"] == 1
        assert data["totalRevenue"] == 100.0
        assert data["ordersByStatus"] == [{"status": "Pending", "count": 1}]
        assert len(data["dailyStats"]) == 1

    async def test_seller_report_defaults(self, client, shop, placed):
        response = await client.get("/api/reports/seller", headers=headers(shop.seller_a))
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["totalRevenue"] == 100.0
        assert data["topProducts"] == [
            {"productId": shop.widget.id, "productName": "Widget", "unitsSold": 2, "revenue": 100.0}
        ]

    async def test_seller_report_refuses_admin(self, client, shop):
        response = await client.get("/api/reports/seller", headers=headers(shop.admin))
        assert response.status_code == 403


class TestCoupons:
    async def test_valid_coupon(self, client, seed):
        now = utcnow()
        await seed.coupon("SAVE10", valid_from=now - timedelta(days=1), valid_to=now + timedelta(days=1))

        response = await client.get(
            "/api/coupons/validate", params={"code": "SAVE10", "orderAmount": "100"}
        )
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Coupon applied"
        assert body["data"] == {"valid": True, "discountAmount": 10.0, "message": ""}

    async def test_unknown_coupon_still_succeeds(self, client):
        response = await client.get("/api/coupons/validate", params={"code": "NOPE"})
        body = response.json()
        assert response.status_code == 200
        assert body["data"]["valid"] is False
        assert body["message"] == "Invalid coupon code."


class TestUnexpectedErrors:
    async def test_generic_500(self, shop, sender):
        def broken_sessions():
            raise RuntimeError("database is gone")

        app = create_app(broken_sessions, settings=Settings(), notifier=sender)
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://shop.test") as c:
            response = await c.get("/api/orders/my-orders", headers=headers(shop.customer))

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": GENERIC_FAILURE,
            "data": None,
            "errors": None,
        }
