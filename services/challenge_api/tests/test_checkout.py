"""
Tests for checkout completion detection and the checkout events endpoint.
"""
import pytest

from challenge_api.core.checkout import CheckoutTracker, is_checkout_complete
from challenge_api.settings import get_settings


class TestIsCheckoutComplete:
    @pytest.mark.parametrize(
        "data",
        [
            {"type": "whop-checkout-complete"},
            {"event": "checkout.completed"},
            {"event": "checkout_completed"},
            {"whopCheckoutComplete": True},
            {"status": "completed"},
            {"status": "success"},
            {"type": "whop", "action": "checkout-complete"},
            {"checkoutComplete": True},
            {"completed": True},
            {"type": "payment_completed"},
            {"event": "order-complete"},
            "checkout-complete",
            "whop:checkout_complete",
            "payment success",
        ],
    )
    def test_completion_messages(self, data):
        assert is_checkout_complete(data) is True

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "resize", "height": 640},
            {"status": "pending"},
            {"completed": "yes"},
            {"type": "whop", "action": "open"},
            {},
            "ready",
            None,
            42,
            ["checkout-complete"],
        ],
    )
    def test_other_messages(self, data):
        assert is_checkout_complete(data) is False


class TestCheckoutTracker:
    def test_counts_each_id_once(self):
        tracker = CheckoutTracker()
        assert tracker.first_completion("chk_1") is True
        assert tracker.first_completion("chk_1") is False
        assert tracker.first_completion("chk_2") is True

    def test_missing_id_always_counts(self):
        tracker = CheckoutTracker()
        assert tracker.first_completion(None) is True
        assert tracker.first_completion("") is True
        assert tracker.first_completion(None) is True

    def test_clear(self):
        tracker = CheckoutTracker()
        tracker.first_completion("chk_1")
        tracker.clear()
        assert tracker.first_completion("chk_1") is True


class TestCheckoutEventsEndpoint:
    """POST /api/checkout/events"""

    def test_completion_increments_rsvp(self, client):
        resp = client.post("/api/checkout/events", json={
            "data": {"type": "whop-checkout-complete"},
            "origin": "https://whop.com",
            "checkoutId": "chk_1",
        })
        assert resp.status_code == 200
        assert resp.json() == {"completed": True, "counted": True, "count": 1}
        assert client.get("/api/rsvp").json()["count"] == 1

    def test_duplicate_completion_counted_once(self, client):
        event = {"data": "checkout-complete", "checkoutId": "chk_1"}
        client.post("/api/checkout/events", json=event)
        resp = client.post("/api/checkout/events", json=event)
        assert resp.json() == {"completed": True, "counted": False, "count": 1}

    def test_non_completion_ignored(self, client):
        resp = client.post("/api/checkout/events", json={"data": {"type": "resize"}})
        assert resp.json() == {"completed": False, "counted": False, "count": 0}

    @pytest.mark.parametrize("data", [42, 3.5, True, ["checkout-complete"], [{"completed": True}]])
    def test_other_json_values_ignored(self, client, data):
        """Numbers, booleans and arrays are classified, not rejected."""
        resp = client.post("/api/checkout/events", json={"data": data, "checkoutId": "chk_1"})
        assert resp.status_code == 200
        assert resp.json() == {"completed": False, "counted": False, "count": 0}

    def test_empty_body(self, client):
        resp = client.post("/api/checkout/events", json={})
        assert resp.status_code == 200
        assert resp.json()["completed"] is False

    def test_secret_enforced(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "checkout_event_secret", "s3cret")
        event = {"data": {"completed": True}}

        assert client.post("/api/checkout/events", json=event).status_code == 401
        assert client.post(
            "/api/checkout/events", json=event, headers={"X-Checkout-Secret": "wrong"}
        ).status_code == 401

        resp = client.post("/api/checkout/events", json=event, headers={"X-Checkout-Secret": "s3cret"})
        assert resp.status_code == 200
        assert resp.json()["counted"] is True
