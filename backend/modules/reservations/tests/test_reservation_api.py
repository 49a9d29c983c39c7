# backend/modules/reservations/tests/test_reservation_api.py

"""
Tests for reservation API endpoints.
"""

from datetime import date, timedelta

from modules.reservations.models import Reservation


def payload(reservation_date, hora="14:00", personas=2, **overrides):
    data = {
        "guest_name": "Lucía",
        "guest_surname": "Pérez",
        "guest_email": "lucia@example.com",
        "guest_phone": "600123123",
        "reservation_date": reservation_date.isoformat(),
        "reservation_time": hora,
        "party_size": personas,
    }
    data.update(overrides)
    return data


class TestAvailabilityAPI:

    def test_single_slot(self, client, weekday_date):
        response = client.get(
            "/reservas/disponibilidad",
            params={"fecha": weekday_date.isoformat(), "hora": "14:00", "personas": 4},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["disponible"] is True
        assert data["hora"] == "14:00"
        assert data["personas"] == 4

    def test_closed_dinner_slot(self, client, sunday):
        response = client.get(
            "/reservas/disponibilidad",
            params={"fecha": sunday.isoformat(), "hora": "21:00", "personas": 2},
        )
        assert response.json()["disponible"] is False

    def test_slot_grid(self, client, sunday):
        response = client.get("/reservas/horarios", params={"fecha": sunday.isoformat()})

        assert response.status_code == 200
        data = response.json()
        assert data["es_dia_cerrado"] is True
        assert data["personas"] == 1
        assert len(data["horarios"]) == 12
        assert data["horarios"][0] == {"time": "13:00", "turno": "comida", "disponible": True}
        assert all(not h["disponible"] for h in data["horarios"] if h["turno"] == "cena")

    def test_invalid_party_size(self, client, weekday_date):
        response = client.get(
            "/reservas/disponibilidad",
            params={"fecha": weekday_date.isoformat(), "hora": "14:00", "personas": 0},
        )
        assert response.status_code == 422


class TestReservationAPI:
    """Test reservation API endpoints"""

    def test_create_reservation_success(self, client, weekday_date):
        response = client.post("/reservas", json=payload(weekday_date, personas=4))

        assert response.status_code == 201
        data = response.json()
        assert data["confirmation_code"].startswith("ALC-")
        assert data["status"] == "confirmed"
        assert data["unit_id"] == "m5"
        assert data["table_ids"] == ["m5"]
        assert data["reservation_time"] == "14:00"
        assert data["cancellation_token"]

    def test_create_reservation_no_availability(self, client, weekday_date):
        # Only one 8-seat combination on the terrace
        first = client.post(
            "/reservas",
            json=payload(weekday_date, personas=8, location_preference="terraza"),
        )
        assert first.status_code == 201
        assert first.json()["unit_id"] == "c3"

        response = client.post(
            "/reservas",
            json=payload(
                weekday_date,
                personas=8,
                location_preference="terraza",
                guest_email="otro@example.com",
            ),
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_duplicate_reservation(self, client, weekday_date):
        client.post("/reservas", json=payload(weekday_date))
        response = client.post("/reservas", json=payload(weekday_date))

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_RESERVATION"

    def test_closed_dinner_rejected(self, client, sunday):
        response = client.post("/reservas", json=payload(sunday, hora="21:00"))

        assert response.status_code == 400
        assert response.json()["error_code"] == "BOOKING_RULE"

    def test_past_date_rejected(self, client):
        yesterday = date.today() - timedelta(days=1)
        response = client.post("/reservas", json=payload(yesterday))
        assert response.status_code == 422

    def test_invalid_email_rejected(self, client, weekday_date):
        for email in ("no-at-sign", "a b@@x.y", "ana@", "@example.com"):
            response = client.post("/reservas", json=payload(weekday_date, guest_email=email))
            assert response.status_code == 422, email

    def test_update_invalid_email_rejected(self, client, weekday_date):
        code = client.post("/reservas", json=payload(weekday_date)).json()["confirmation_code"]

        response = client.put(f"/reservas/{code}", json={"guest_email": "a b@@x.y"})

        assert response.status_code == 422

    def test_get_reservation_by_code(self, client, weekday_date):
        code = client.post("/reservas", json=payload(weekday_date)).json()["confirmation_code"]

        response = client.get(f"/reservas/{code}")

        assert response.status_code == 200
        assert response.json()["confirmation_code"] == code
        assert "cancellation_token" not in response.json()

    def test_get_unknown_reservation(self, client):
        response = client.get("/reservas/ALC-NOPE-0000")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"
        assert response.json()["path"] == "/reservas/ALC-NOPE-0000"

    def test_update_reservation(self, client, weekday_date):
        code = client.post("/reservas", json=payload(weekday_date)).json()["confirmation_code"]

        response = client.put(f"/reservas/{code}", json={"party_size": 5, "comments": "Trona"})

        assert response.status_code == 200
        data = response.json()
        assert data["party_size"] == 5
        assert data["unit_id"] == "m11"
        assert data["comments"] == "Trona"

    def test_update_conflict(self, client, weekday_date):
        client.post(
            "/reservas",
            json=payload(weekday_date, personas=8, location_preference="terraza", guest_email="a@example.com"),
        )
        code = client.post(
            "/reservas",
            json=payload(weekday_date, personas=4, location_preference="interior"),
        ).json()["confirmation_code"]

        response = client.put(
            f"/reservas/{code}", json={"party_size": 8, "location_preference": "terraza"}
        )

        assert response.status_code == 409

    def test_cancel_reservation(self, client, db_session, weekday_date):
        code = client.post("/reservas", json=payload(weekday_date, personas=4)).json()["confirmation_code"]

        response = client.delete(f"/reservas/{code}", params={"motivo": "Enfermedad"})

        assert response.status_code == 200
        assert response.json()["released_table_ids"] == ["m5"]
        assert db_session.query(Reservation).count() == 0

        again = client.delete(f"/reservas/{code}")
        assert again.status_code == 409
        assert again.json()["error_code"] == "ALREADY_CANCELLED"

    def test_cancel_with_token(self, client, weekday_date):
        created = client.post("/reservas", json=payload(weekday_date)).json()
        code = created["confirmation_code"]

        wrong = client.delete(f"/reservas/{code}", params={"token": "not-the-token"})
        assert wrong.status_code == 403
        assert wrong.json()["error_code"] == "INVALID_TOKEN"

        response = client.delete(
            f"/reservas/{code}", params={"token": created["cancellation_token"]}
        )
        assert response.status_code == 200
        assert response.json()["confirmation_code"] == code

    def test_cancel_unknown(self, client):
        assert client.delete("/reservas/ALC-NOPE-0000").status_code == 404

    def test_round_trip_through_api(self, client, weekday_date):
        params = {"fecha": weekday_date.isoformat(), "hora": "14:00", "personas": 8}
        codes = [
            client.post(
                "/reservas",
                json=payload(weekday_date, personas=8, guest_email=f"big{i}@example.com"),
            ).json()["confirmation_code"]
            for i in range(4)
        ]
        assert client.get("/reservas/disponibilidad", params=params).json()["disponible"] is False

        client.delete(f"/reservas/{codes[1]}")

        assert client.get("/reservas/disponibilidad", params=params).json()["disponible"] is True

    def test_admin_list(self, client, weekday_date):
        for i in range(3):
            client.post("/reservas", json=payload(weekday_date, guest_email=f"guest.{i}@example.com"))

        response = client.get(
            "/reservas/admin/lista",
            params={"fecha": weekday_date.isoformat(), "page": 1, "limit": 2},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["reservations"]) == 2

        found = client.get("/reservas/admin/lista", params={"busqueda": "guest.1@"}).json()
        assert found["total"] == 1
