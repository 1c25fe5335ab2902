"""Dependency injection container.

Holds the collaborators that used to be ambient globals so routes and
services receive them explicitly and tests can swap them out.

Usage:
    from app.container import container

    container.device_directory()          # DeviceDirectoryClient
    container.telemetry_dispatcher()      # TelemetryDispatcher

    # In tests
    with container.device_directory.override(FakeDirectory()):
        response = client.get("/wizard/brands")
"""

from __future__ import annotations

from dependency_injector import containers, providers  # type: ignore[import-not-found]

from app.config import settings


def _device_directory_factory():
    from app.services.device_directory import DeviceDirectoryClient

    return DeviceDirectoryClient(
        base_url=settings.device_directory_url,
        timeout=settings.device_directory_timeout,
        token=settings.device_directory_token,
    )


def _device_identity_factory():
    from app.services.device_identity import DeviceIdentityProvider, FileIdentityStore

    return DeviceIdentityProvider(FileIdentityStore(settings.device_id_path))


def _telemetry_dispatcher_factory():
    from app.services.telemetry_dispatch import TelemetryDispatcher

    return TelemetryDispatcher()


def _wizard_rules_factory():
    from app.logic.wizard_logic import load_rule_table

    return load_rule_table(settings.wizard_rules_path)


class Container(containers.DeclarativeContainer):
    """Application service container."""

    device_directory = providers.Singleton(_device_directory_factory)
    # Install-wide identity for processes without a browser cookie (workers, scripts).
    device_identity = providers.Singleton(_device_identity_factory)
    telemetry_dispatcher = providers.Singleton(_telemetry_dispatcher_factory)
    wizard_rules = providers.Singleton(_wizard_rules_factory)


container = Container()
