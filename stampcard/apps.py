"""Stampcard app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class StampcardConfig(AppConfig):
    name = "stampcard"
    verbose_name = _("Stampcard - Loyalty Stamps")

    _service = None

    @property
    def service(self):
        """The process's StampcardService, built from settings on first use."""
        if self._service is None:
            from stampcard.service import StampcardService

            self._service = StampcardService.from_settings()
        return self._service

    @service.setter
    def service(self, value):
        self._service = value
