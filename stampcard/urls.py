from django.urls import path

from .views import (
    AccountDetailView,
    AccountListView,
    AddStampsView,
    ProgramView,
    RedeemView,
    ResetView,
    ScanView,
)

app_name = "stampcard"

urlpatterns = [
    path("program/", ProgramView.as_view(), name="program"),
    path("accounts/", AccountListView.as_view(), name="account-list"),
    path("accounts/<str:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("accounts/<str:account_id>/stamps/", AddStampsView.as_view(), name="account-stamps"),
    path("accounts/<str:account_id>/redeem/", RedeemView.as_view(), name="account-redeem"),
    path("scan/", ScanView.as_view(), name="scan"),
    path("reset/", ResetView.as_view(), name="reset"),
]
