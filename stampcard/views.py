"""
Stampcard JSON API.

Customer card:
    GET  program/                   Program settings
    GET  accounts/<id>/             Account, progress and QR payload
    POST accounts/                  Create account {"name", "phone"}

Admin console:
    GET  accounts/?q=               Search by name / phone / id
    POST accounts/<id>/stamps/      Add stamps {"count": 1}
    POST accounts/<id>/redeem/      Redeem one reward (409 when denied)
    POST scan/                      Apply a scanner payload
    POST reset/                     Clear every account
"""

from __future__ import annotations

import json
import logging

from django.apps import apps
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from stampcard import codec
from stampcard.conf import stampcard_settings
from stampcard.exceptions import NotFoundError, StampcardError, ValidationError
from stampcard.ledger import Account
from stampcard.scan import build_qr_payload
from stampcard.service import StampcardService

logger = logging.getLogger("stampcard.views")


def serialize_account(service: StampcardService, account: Account, detail: bool = False) -> dict:
    data = codec.account_to_dict(account)
    progress = service.progress(account)
    data["progress"] = {
        "filled": progress.filled,
        "remaining": progress.remaining,
        "readyToRedeem": progress.ready_to_redeem,
        "rewardsAvailable": progress.rewards_available,
    }
    if detail:
        data["qrPayload"] = build_qr_payload(account.id)
    return data


@method_decorator(csrf_exempt, name="dispatch")
class StampcardView(View):
    """
    Base view: resolves the service and maps StampcardError to JSON.

    The service defaults to the app's; pass service=... to as_view() to
    bind another one.
    """

    service: StampcardService | None = None

    def get_service(self) -> StampcardService:
        if self.service is not None:
            return self.service
        return apps.get_app_config("stampcard").service

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as exc:
            return JsonResponse(exc.as_dict(), status=400)
        except NotFoundError as exc:
            return JsonResponse(exc.as_dict(), status=404)
        except StampcardError as exc:
            return JsonResponse(exc.as_dict(), status=400)
        except Exception:
            logger.exception("Stampcard API: %s %s failed", request.method, request.path)
            return JsonResponse({"code": "INTERNAL_ERROR", "message": "Internal error"}, status=500)

    def parse_body(self, request) -> dict:
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (ValueError, RecursionError):
            raise ValidationError("STAMPCARD_INVALID_JSON", message="Invalid JSON")
        if not isinstance(data, dict):
            raise ValidationError("STAMPCARD_INVALID_JSON", message="JSON body must be an object")
        return data


class ProgramView(StampcardView):
    def get(self, request):
        return JsonResponse(
            {
                "brand": stampcard_settings.BRAND,
                "slogan": stampcard_settings.SLOGAN,
                "city": stampcard_settings.CITY,
                "rewardThreshold": self.get_service().reward_threshold,
            }
        )


class AccountListView(StampcardView):
    def get(self, request):
        service = self.get_service()
        accounts = service.list_accounts(request.GET.get("q", ""))
        return JsonResponse({"accounts": [serialize_account(service, a) for a in accounts]})

    def post(self, request):
        data = self.parse_body(request)
        name = data.get("name", "")
        phone = data.get("phone", "")
        if not isinstance(name, str) or not isinstance(phone, str):
            raise ValidationError("STAMPCARD_INVALID_NAME", message="name and phone must be strings")

        service = self.get_service()
        account_id = service.create_account(name, phone)
        account = service.get_account(account_id)
        return JsonResponse(serialize_account(service, account, detail=True), status=201)


class AccountDetailView(StampcardView):
    def get(self, request, account_id):
        service = self.get_service()
        account = service.get_account(account_id)
        if account is None:
            raise NotFoundError(account_id=account_id)
        return JsonResponse(serialize_account(service, account, detail=True))


class AddStampsView(StampcardView):
    def post(self, request, account_id):
        count = self.parse_body(request).get("count", 1)
        service = self.get_service()
        account = service.add_stamps(account_id, count)
        return JsonResponse(serialize_account(service, account))


class RedeemView(StampcardView):
    def post(self, request, account_id):
        service = self.get_service()
        result = service.redeem(account_id)
        return JsonResponse(
            {
                "status": result.status.value,
                "account": serialize_account(service, result.account),
            },
            status=200 if result.approved else 409,
        )


class ScanView(StampcardView):
    """
    Accepts the scanner payload as the body, or wrapped as
    {"payload": ..., "count": n}.
    """

    def post(self, request):
        data = self.parse_body(request)
        count = 1
        if "payload" in data:
            count = data.get("count", 1)
            data = data["payload"]

        service = self.get_service()
        account = service.apply_scan(data, count)
        return JsonResponse(serialize_account(service, account))


class ResetView(StampcardView):
    def post(self, request):
        removed = self.get_service().clear_all()
        logger.warning("Stampcard API: ledger reset (%d accounts removed)", removed)
        return JsonResponse({"status": "cleared", "removed": removed})
