"""
Tests for the Stampcard JSON API.

Customer card:
1. Program settings
2. Create account → 201 (400 on empty name / bad JSON)
3. Account detail with progress and QR payload (404 unknown)

Admin console:
4. Search
5. Add stamps (400 on bad count, 404 unknown)
6. Redeem → 200 approved / 409 denied
7. Scan payload
8. Reset
"""

import json

import pytest
from django.test import RequestFactory
from django.urls import reverse

from stampcard.scan import build_qr_payload
from stampcard.views import (
    AccountDetailView,
    AccountListView,
    AddStampsView,
    ProgramView,
    RedeemView,
    ResetView,
    ScanView,
)


@pytest.fixture
def factory():
    return RequestFactory()


def post_json(factory, path, data=None):
    body = "" if data is None else json.dumps(data)
    return factory.post(path, data=body, content_type="application/json")


def body(response):
    return json.loads(response.content)


@pytest.fixture
def sara(service):
    account_id = service.create_account("Sara", "+966500000001")
    return account_id


# ═══════════════════════════════════════════════════════════════════
# Customer card
# ═══════════════════════════════════════════════════════════════════


class TestProgramView:
    def test_program_settings(self, factory, service):
        response = ProgramView.as_view(service=service)(factory.get("/program/"))
        assert response.status_code == 200
        assert body(response) == {
            "brand": "MINIPAN COFFEE",
            "slogan": "Bite • Sip • Joy",
            "city": "Riyadh",
            "rewardThreshold": 8,
        }


class TestCreateAccount:
    def test_create(self, factory, service):
        view = AccountListView.as_view(service=service)
        response = view(post_json(factory, "/accounts/", {"name": " Sara ", "phone": "0555"}))

        assert response.status_code == 201
        data = body(response)
        assert data["name"] == "Sara"
        assert data["stampCount"] == 0
        assert data["redeemedCount"] == 0
        assert json.loads(data["qrPayload"])["uid"] == data["id"]
        assert service.get_account(data["id"]) is not None

    def test_empty_name(self, factory, service):
        view = AccountListView.as_view(service=service)
        response = view(post_json(factory, "/accounts/", {"name": "  ", "phone": "x"}))

        assert response.status_code == 400
        assert body(response)["code"] == "STAMPCARD_INVALID_NAME"
        assert service.list_accounts() == []

    def test_non_string_name(self, factory, service):
        view = AccountListView.as_view(service=service)
        response = view(post_json(factory, "/accounts/", {"name": ["Sara"]}))
        assert response.status_code == 400

    def test_invalid_json(self, factory, service):
        view = AccountListView.as_view(service=service)
        request = factory.post("/accounts/", data="{nope", content_type="application/json")
        response = view(request)

        assert response.status_code == 400
        assert body(response)["code"] == "STAMPCARD_INVALID_JSON"

    def test_json_must_be_object(self, factory, service):
        view = AccountListView.as_view(service=service)
        response = view(post_json(factory, "/accounts/", ["Sara"]))
        assert response.status_code == 400


class TestAccountDetail:
    def test_detail(self, factory, service, sara):
        service.add_stamps(sara, 8)
        response = AccountDetailView.as_view(service=service)(factory.get("/"), account_id=sara)

        assert response.status_code == 200
        data = body(response)
        assert data["id"] == sara
        assert data["progress"] == {
            "filled": 0,
            "remaining": 8,
            "readyToRedeem": True,
            "rewardsAvailable": 1,
        }
        qr = json.loads(data["qrPayload"])
        assert qr["t"] == "stamp"
        assert qr["uid"] == sara

    def test_unknown(self, factory, service):
        response = AccountDetailView.as_view(service=service)(factory.get("/"), account_id="nope")
        assert response.status_code == 404
        assert body(response)["code"] == "STAMPCARD_ACCOUNT_NOT_FOUND"


# ═══════════════════════════════════════════════════════════════════
# Admin console
# ═══════════════════════════════════════════════════════════════════


class TestAccountSearch:
    def test_list_all(self, factory, service, sara):
        service.create_account("Omar", "0555")
        response = AccountListView.as_view(service=service)(factory.get("/accounts/"))

        assert response.status_code == 200
        assert [a["name"] for a in body(response)["accounts"]] == ["Sara", "Omar"]

    def test_filter(self, factory, service, sara):
        service.create_account("Omar", "0555")
        response = AccountListView.as_view(service=service)(factory.get("/accounts/", {"q": "SAR"}))
        assert [a["id"] for a in body(response)["accounts"]] == [sara]

    def test_no_results(self, factory, service, sara):
        response = AccountListView.as_view(service=service)(factory.get("/accounts/", {"q": "zzz"}))
        assert body(response)["accounts"] == []


class TestAddStampsView:
    def test_default_one(self, factory, service, sara):
        response = AddStampsView.as_view(service=service)(post_json(factory, "/"), account_id=sara)
        assert response.status_code == 200
        assert body(response)["stampCount"] == 1

    def test_count(self, factory, service, sara):
        view = AddStampsView.as_view(service=service)
        response = view(post_json(factory, "/", {"count": 2}), account_id=sara)
        assert body(response)["stampCount"] == 2
        assert body(response)["progress"]["remaining"] == 6

    @pytest.mark.parametrize("count", [0, -1, "2", 1.5])
    def test_bad_count(self, factory, service, sara, count):
        view = AddStampsView.as_view(service=service)
        response = view(post_json(factory, "/", {"count": count}), account_id=sara)

        assert response.status_code == 400
        assert body(response)["code"] == "STAMPCARD_INVALID_COUNT"
        assert service.get_account(sara).stamp_count == 0

    def test_unknown(self, factory, service):
        response = AddStampsView.as_view(service=service)(post_json(factory, "/"), account_id="nonexistent")
        assert response.status_code == 404

    def test_get_not_allowed(self, factory, service, sara):
        response = AddStampsView.as_view(service=service)(factory.get("/"), account_id=sara)
        assert response.status_code == 405


class TestRedeemView:
    def test_denied(self, factory, service, sara):
        service.add_stamps(sara, 5)
        response = RedeemView.as_view(service=service)(post_json(factory, "/"), account_id=sara)

        assert response.status_code == 409
        data = body(response)
        assert data["status"] == "denied"
        assert data["account"]["stampCount"] == 5

    def test_approved(self, factory, service, sara):
        service.add_stamps(sara, 8)
        response = RedeemView.as_view(service=service)(post_json(factory, "/"), account_id=sara)

        assert response.status_code == 200
        data = body(response)
        assert data["status"] == "approved"
        assert data["account"]["stampCount"] == 0
        assert data["account"]["redeemedCount"] == 1

    def test_unknown(self, factory, service):
        response = RedeemView.as_view(service=service)(post_json(factory, "/"), account_id="nope")
        assert response.status_code == 404


class TestScanView:
    def test_compact_payload(self, factory, service, sara):
        request = factory.post("/scan/", data=build_qr_payload(sara), content_type="application/json")
        response = ScanView.as_view(service=service)(request)

        assert response.status_code == 200
        assert body(response)["stampCount"] == 1

    def test_wrapped_payload_with_count(self, factory, service, sara):
        payload = {"type": "stamp", "accountId": sara, "timestamp": 1}
        response = ScanView.as_view(service=service)(
            post_json(factory, "/scan/", {"payload": payload, "count": 2})
        )
        assert body(response)["stampCount"] == 2

    def test_invalid_payload(self, factory, service):
        response = ScanView.as_view(service=service)(post_json(factory, "/scan/", {"t": "coffee"}))
        assert response.status_code == 400
        assert body(response)["code"] == "STAMPCARD_INVALID_SCAN"

    @pytest.mark.parametrize("ts", ["Infinity", "-Infinity", "NaN", "1e400"])
    def test_non_finite_timestamp(self, factory, service, sara, ts):
        request = factory.post(
            "/scan/",
            data=f'{{"t":"stamp","uid":"{sara}","ts":{ts}}}',
            content_type="application/json",
        )
        response = ScanView.as_view(service=service)(request)

        assert response.status_code == 400
        assert body(response)["code"] == "STAMPCARD_INVALID_SCAN"
        assert service.get_account(sara).stamp_count == 0

    def test_unknown_account(self, factory, service):
        response = ScanView.as_view(service=service)(
            post_json(factory, "/scan/", {"t": "stamp", "uid": "nobody00"})
        )
        assert response.status_code == 404


class TestResetView:
    def test_reset(self, factory, service, sara):
        service.create_account("Omar")
        response = ResetView.as_view(service=service)(post_json(factory, "/reset/"))

        assert response.status_code == 200
        assert body(response) == {"status": "cleared", "removed": 2}
        assert service.list_accounts() == []


class TestUnexpectedErrors:
    def test_internal_error_returns_500(self, factory, service, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(service, "list_accounts", explode)
        response = AccountListView.as_view(service=service)(factory.get("/accounts/"))

        assert response.status_code == 500
        assert body(response)["code"] == "INTERNAL_ERROR"
        assert "boom" not in response.content.decode()


# ═══════════════════════════════════════════════════════════════════
# URL routing through the app service
# ═══════════════════════════════════════════════════════════════════


class TestUrls:
    def test_full_cycle_via_client(self, client, app_service):
        response = client.post(
            reverse("stampcard:account-list"),
            data={"name": "Sara", "phone": "+9665"},
            content_type="application/json",
        )
        assert response.status_code == 201
        account_id = response.json()["id"]

        stamps_url = reverse("stampcard:account-stamps", args=[account_id])
        redeem_url = reverse("stampcard:account-redeem", args=[account_id])

        client.post(stamps_url, data={"count": 5}, content_type="application/json")
        assert client.post(redeem_url).status_code == 409
        client.post(stamps_url, data={"count": 3}, content_type="application/json")

        response = client.post(redeem_url)
        assert response.status_code == 200
        assert response.json()["account"]["stampCount"] == 0
        assert response.json()["account"]["redeemedCount"] == 1

        detail = client.get(reverse("stampcard:account-detail", args=[account_id])).json()
        assert detail["redeemedCount"] == 1

    def test_program_url(self, client, app_service):
        assert client.get(reverse("stampcard:program")).json()["rewardThreshold"] == 8
