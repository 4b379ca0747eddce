"""Unit tests for ActivationGate."""

import logging

from mutenancy.config import settings
from mutenancy.modules.tenancy.activation import ActivationGate
from mutenancy.modules.tenancy.tenancy import tenant_scope


class AlwaysOnProvider:
    @classmethod
    def is_active(cls):
        return True

    @classmethod
    def get_current_tenantid(cls):
        return 42


def test_default_provider_follows_settings(monkeypatch):
    gate = ActivationGate()

    monkeypatch.setattr(settings, "multitenancy_enabled", False)
    assert gate.is_active() is False

    monkeypatch.setattr(settings, "multitenancy_enabled", True)
    assert gate.is_active() is True


def test_missing_provider_module_means_inactive(caplog):
    gate = ActivationGate("mutenancy.plugins.not_installed:Tenancy")

    with caplog.at_level(logging.WARNING, logger="mutenancy.modules.tenancy.activation"):
        assert gate.is_active() is False
        assert gate.is_active() is False

    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "not installed" in warnings[0].getMessage()


def test_missing_provider_attribute_means_inactive():
    gate = ActivationGate("mutenancy.modules.tenancy.tenancy:MissingProvider")

    assert gate.is_active() is False
    assert gate.current_tenantid() is None


def test_custom_provider_is_consulted():
    gate = ActivationGate(f"{__name__}:AlwaysOnProvider")

    assert gate.is_active() is True
    assert gate.current_tenantid() == 42


def test_current_tenantid_reads_tenant_scope(monkeypatch):
    monkeypatch.setattr(settings, "multitenancy_enabled", True)
    gate = ActivationGate()

    assert gate.current_tenantid() is None
    with tenant_scope(7):
        assert gate.current_tenantid() == 7
        with tenant_scope(8):
            assert gate.current_tenantid() == 8
        assert gate.current_tenantid() == 7
    assert gate.current_tenantid() is None


def test_current_tenantid_is_none_when_inactive(monkeypatch):
    monkeypatch.setattr(settings, "multitenancy_enabled", False)

    with tenant_scope(7):
        assert ActivationGate().current_tenantid() is None
