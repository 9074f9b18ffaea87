"""
预订API集成测试
"""


class TestReservationAPI:
    """预订API测试"""

    def create(self, client, payload):
        response = client.post("/api/reservations", json=payload)
        assert response.status_code == 201
        return response.json()["data"]

    def test_create(self, client, sample_reservation):
        data = self.create(client, sample_reservation)
        assert data["booking_id"].startswith("BK")
        assert data["status"] == "pending"
        assert data["composition"]["kids"] == 2
        assert data["preferences"]["table_area"] == "window"
        assert data["dietary"] == {"plan": "", "restrictions": [], "notes": ""}
        assert data["created_at"]

    def test_invalid_enum_in_section(self, client, sample_reservation):
        payload = {**sample_reservation, "preferences": {"table_area": "rooftop"}}
        response = client.post("/api/reservations", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Validation error"

    def test_get_not_found(self, client):
        response = client.get("/api/reservations/BK0")
        assert response.status_code == 404
        assert response.json()["message"] == "Reservation not found"

    def test_status_update(self, client, sample_reservation):
        reservation = self.create(client, sample_reservation)
        response = client.patch(
            f"/api/reservations/{reservation['booking_id']}/status", json={"status": "confirmed"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Reservation status updated successfully"
        assert response.json()["data"]["status"] == "confirmed"

    def test_status_update_without_body(self, client, sample_reservation):
        reservation = self.create(client, sample_reservation)
        response = client.patch(f"/api/reservations/{reservation['booking_id']}/status")
        assert response.status_code == 400
        assert response.json()["message"] == "Status is required"

    def test_full_update_keeps_booking_id(self, client, sample_reservation):
        reservation = self.create(client, sample_reservation)
        payload = {**sample_reservation, "party_size": 6, "booking_id": "BKFORGED"}
        data = client.put(f"/api/reservations/{reservation['booking_id']}", json=payload).json()["data"]
        assert data["booking_id"] == reservation["booking_id"]
        assert data["party_size"] == 6

    def test_partial_update_nested_section(self, client, sample_reservation):
        reservation = self.create(client, sample_reservation)
        response = client.patch(
            f"/api/reservations/{reservation['booking_id']}",
            json={"parking": {"required": True, "type": "valet"}},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["parking"] == {"required": True, "type": "valet"}
        assert data["party_size"] == 4

    def test_patch_by_email_latest(self, client, sample_reservation):
        older = self.create(client, sample_reservation)
        newer = self.create(client, sample_reservation)
        response = client.patch("/api/reservations/email/alice@example.com", json={"party_size": 2})
        assert response.status_code == 200
        assert response.json()["data"]["booking_id"] == newer["booking_id"]
        assert client.get(f"/api/reservations/{older['booking_id']}").json()["data"]["party_size"] == 4

    def test_patch_by_email_empty(self, client, sample_reservation):
        self.create(client, sample_reservation)
        response = client.patch("/api/reservations/email/alice@example.com", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "No data provided for update"

    def test_search_by_user(self, client, sample_reservation):
        self.create(client, sample_reservation)
        self.create(client, {**sample_reservation, "customer_name": "Zed", "customer_email": "zed@example.com"})
        body = client.get("/api/reservations/search/user", params={"email": "zed@"}).json()
        assert body["count"] == 1
        assert body["data"][0]["customer_name"] == "Zed"

    def test_search_by_user_without_parameters(self, client):
        response = client.get("/api/reservations/search/user")
        assert response.status_code == 400

    def test_stats(self, client, sample_reservation):
        first = self.create(client, sample_reservation)
        self.create(client, sample_reservation)
        client.patch(f"/api/reservations/{first['booking_id']}/status", json={"status": "cancelled"})
        data = client.get("/api/reservations/stats").json()["data"]
        assert data["total"] == 2
        assert {s["_id"]: s["count"] for s in data["byStatus"]} == {"cancelled": 1, "pending": 1}

    def test_delete(self, client, sample_reservation):
        reservation = self.create(client, sample_reservation)
        assert client.delete(f"/api/reservations/{reservation['booking_id']}").status_code == 200
        assert client.get(f"/api/reservations/{reservation['booking_id']}").status_code == 404
