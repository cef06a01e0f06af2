import unittest

from fastapi.testclient import TestClient

from food_rescue.application.command_gate import CommandGate
from food_rescue.interfaces.deps import get_clock, get_command_gate, get_store
from food_rescue.main import app

from _support import FakeClock, make_store

LISTING_FORM = {
    "donor_type": "Cafe",
    "food_description": "Day-old pastries",
    "quantity": "2 boxes",
    "expiry_date": "2026-01-11",
    "pickup_window": "17:00-18:00",
    "location": "Station Road 4",
    "notes": "",
}


class TestHttpApi(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.db = make_store()
        self.clock = FakeClock()
        self.gate = CommandGate()
        app.dependency_overrides[get_store] = lambda: self.store
        app.dependency_overrides[get_clock] = lambda: self.clock
        app.dependency_overrides[get_command_gate] = lambda: self.gate
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()

    def _login(self, name: str, role: str) -> dict:
        resp = self.client.post("/api/auth/login", json={"name": name, "contact": "", "credential": "1234"})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["role"])
        resp = self.client.post("/api/auth/role", json={"role": role})
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})

    def test_login_validation_error_shape(self) -> None:
        resp = self.client.post("/api/auth/login", json={"name": "Dana", "credential": "12"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"]["code"], "ValidationError")

    def test_requires_session(self) -> None:
        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"]["code"], "AuthorizationError")

    def test_full_flow(self) -> None:
        donor = self._login("Dana", "DONOR")
        resp = self.client.post("/api/listings", data=LISTING_FORM)
        self.assertEqual(resp.status_code, 201, resp.text)
        listing = resp.json()
        self.assertEqual(listing["status"], "AVAILABLE")
        self.assertEqual(listing["createdByUserId"], donor["id"])
        self.assertTrue(listing["canDelete"])
        self.assertFalse(listing["fullyConfirmed"])

        history = self.client.get("/api/listings/donor/history").json()
        self.assertEqual([l["id"] for l in history], [listing["id"]])

        self.assertEqual(self.client.get("/api/listings/charity/available").status_code, 403)

        charity = self._login("Hope Kitchen", "CHARITY")
        available = self.client.get("/api/listings/charity/available", params={"q": "pastries"}).json()
        self.assertEqual([l["id"] for l in available], [listing["id"]])

        resp = self.client.post(f"/api/listings/{listing['id']}/claim")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["charityUserId"], charity["id"])

        resp = self.client.post(f"/api/listings/{listing['id']}/claim")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"]["code"], "PreconditionError")

        resp = self.client.post(f"/api/listings/{listing['id']}/chat", json={"text": "Coming at five"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["senderRole"], "CHARITY")

        resp = self.client.post(f"/api/listings/{listing['id']}/ack", json={"side": "CHARITY"})
        self.assertTrue(resp.json()["charityAck"])

        self._login("Dana", "DONOR")
        resp = self.client.post(f"/api/listings/{listing['id']}/ack", json={"side": "DONOR"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["fullyConfirmed"])

        resp = self.client.delete(f"/api/listings/{listing['id']}")
        self.assertEqual(resp.status_code, 409)

        stats = self.client.get("/api/listings/stats").json()
        self.assertEqual(stats, {"available": 0, "claimed": 1, "total": 1})

    def test_delete_window_over_http(self) -> None:
        self._login("Dana", "DONOR")
        listing = self.client.post("/api/listings", data=LISTING_FORM).json()

        self.clock.advance(minutes=10, seconds=1)
        history = self.client.get("/api/listings/donor/history").json()
        self.assertFalse(history[0]["canDelete"])
        resp = self.client.delete(f"/api/listings/{listing['id']}")
        self.assertEqual(resp.status_code, 409)

    def test_delete_and_not_found(self) -> None:
        self._login("Dana", "DONOR")
        listing = self.client.post("/api/listings", data=LISTING_FORM).json()
        self.clock.advance(minutes=3)

        self.assertEqual(self.client.delete(f"/api/listings/{listing['id']}").status_code, 204)
        self.assertEqual(self.client.get("/api/listings/donor/history").json(), [])
        resp = self.client.delete(f"/api/listings/{listing['id']}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["code"], "NotFoundError")

    def test_missing_fields_rejected(self) -> None:
        self._login("Dana", "DONOR")
        resp = self.client.post("/api/listings", data={**LISTING_FORM, "location": " "})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"]["details"]["missing"], ["location"])

    def test_image_upload_becomes_data_url(self) -> None:
        self._login("Dana", "DONOR")
        resp = self.client.post(
            "/api/listings",
            data=LISTING_FORM,
            files={"image": ("tray.png", b"\x89PNG fake", "image/png")},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertTrue(resp.json()["imageRef"].startswith("data:image/png;base64,"))

    def test_non_image_upload_rejected(self) -> None:
        self._login("Dana", "DONOR")
        resp = self.client.post(
            "/api/listings",
            data=LISTING_FORM,
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )
        self.assertEqual(resp.status_code, 422)

    def test_second_submission_while_one_is_pending(self) -> None:
        donor = self._login("Dana", "DONOR")
        with self.gate.submission(donor["id"]):
            resp = self.client.post("/api/listings", data=LISTING_FORM)
            self.assertEqual(resp.status_code, 409)
            self.assertEqual(resp.json()["error"]["code"], "PreconditionError")

        self.assertFalse(self.gate.is_pending(donor["id"]))
        resp = self.client.post("/api/listings", data=LISTING_FORM)
        self.assertEqual(resp.status_code, 201)

    def test_pending_submission_is_per_donor(self) -> None:
        self._login("Dana", "DONOR")
        with self.gate.submission("U-someone-else"):
            resp = self.client.post("/api/listings", data=LISTING_FORM)
        self.assertEqual(resp.status_code, 201)

    def test_failed_submission_is_not_left_pending(self) -> None:
        donor = self._login("Dana", "DONOR")
        resp = self.client.post("/api/listings", data={**LISTING_FORM, "quantity": ""})
        self.assertEqual(resp.status_code, 422)
        self.assertFalse(self.gate.is_pending(donor["id"]))

    def test_logout(self) -> None:
        self._login("Dana", "DONOR")
        self.assertEqual(self.client.post("/api/auth/logout").status_code, 204)
        self.assertEqual(self.client.get("/api/auth/me").status_code, 403)


if __name__ == "__main__":
    unittest.main(verbosity=2)
