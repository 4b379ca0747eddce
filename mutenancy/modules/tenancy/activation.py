"""ActivationGate: the single "is multi-tenancy active" predicate."""

import importlib
import logging

from mutenancy.config import settings
from mutenancy.exceptions import TenancyNotInstalledException

logger = logging.getLogger(__name__)


class ActivationGate:
    """Resolves the tenancy provider and asks it whether the feature is on.

    The provider is configured as a ``module:attribute`` path. A provider that
    cannot be imported means the feature is not installed, which is reported
    as inactive rather than as an error.
    """

    def __init__(self, provider_path: str | None = None) -> None:
        self.provider_path = provider_path
        self._warned = False

    def _resolve_provider(self):
        path = self.provider_path or settings.tenancy_provider
        module_name, _, attribute = path.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise TenancyNotInstalledException(
                f"Tenancy provider module '{module_name}' is not installed"
            ) from exc

        provider = getattr(module, attribute, None) if attribute else None
        if provider is None:
            raise TenancyNotInstalledException(f"Tenancy provider '{path}' does not exist")
        return provider

    def is_active(self) -> bool:
        try:
            provider = self._resolve_provider()
        except TenancyNotInstalledException as exc:
            if not self._warned:
                logger.warning("%s, multi-tenancy is inactive", exc.message)
                self._warned = True
            return False
        return bool(provider.is_active())

    def current_tenantid(self) -> int | None:
        """Tenant in the current evaluation scope, None when inactive or unscoped."""
        if not self.is_active():
            return None
        return self._resolve_provider().get_current_tenantid()


default_gate = ActivationGate()


def is_active() -> bool:
    return default_gate.is_active()
