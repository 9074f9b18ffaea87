"""
外卖订单API集成测试
"""


class TestDeliveryAPI:
    """外卖订单API测试"""

    def create(self, client, payload):
        response = client.post("/api/delivery", json=payload)
        assert response.status_code == 201
        return response.json()["data"]

    def test_create_default_fee(self, client, sample_delivery):
        data = self.create(client, sample_delivery)
        assert data["order_id"].startswith("DO")
        assert data["total"] == 23.25
        assert data["delivery_fee"] == 5.0

    def test_create_requires_address(self, client, sample_delivery):
        payload = {**sample_delivery}
        del payload["delivery_address"]
        response = client.post("/api/delivery", json=payload)
        assert response.status_code == 400
        assert "delivery_address" in response.json()["error"]

    def test_status_enum(self, client, sample_delivery):
        order = self.create(client, sample_delivery)
        ok = client.patch(f"/api/delivery/{order['order_id']}/status", json={"status": "out_for_delivery"})
        assert ok.status_code == 200
        bad = client.patch(f"/api/delivery/{order['order_id']}/status", json={"status": "ready"})
        assert bad.status_code == 400

    def test_partial_update_fee_keeps_total(self, client, sample_delivery):
        order = self.create(client, sample_delivery)
        data = client.patch(f"/api/delivery/{order['order_id']}", json={"delivery_fee": 8}).json()["data"]
        assert data["delivery_fee"] == 8
        assert data["total"] == 23.25

    def test_search_by_user_is_public(self, client, sample_delivery):
        self.create(client, sample_delivery)
        response = client.get("/api/delivery/search/user", params={"name": "john"})
        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_stats_revenue_includes_fee(self, client, sample_delivery):
        self.create(client, sample_delivery)
        self.create(client, {**sample_delivery, "delivery_fee": 0})
        data = client.get("/api/delivery/stats").json()["data"]
        assert data["total"] == 2
        assert data["totalRevenue"] == 51.5

    def test_delete_missing(self, client):
        response = client.delete("/api/delivery/DO0")
        assert response.status_code == 404
        assert response.json()["message"] == "Delivery order not found"
