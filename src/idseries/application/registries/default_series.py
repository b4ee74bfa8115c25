from __future__ import annotations

from idseries.application.registries.series_registry import SeriesRegistry
from idseries.domain.series import Scope, SeriesDefinition


DEFAULT_SERIES = [
    # Membership numbers, reset every calendar year.
    {"code": "member_ind", "template": "EAC-MBR-{YYYY}-{SEQ:4}", "scope": Scope.yearly},
    {"code": "member_org", "template": "EAC-ORG-{YYYY}-{SEQ:4}", "scope": Scope.yearly},
    # Applicant IDs handed out when an application is first saved.
    {"code": "app_ind", "template": "APP-MBR-{YYYY}-{SEQ:4}", "scope": Scope.yearly},
    {"code": "app_org", "template": "APP-ORG-{YYYY}-{SEQ:4}", "scope": Scope.yearly},
    # Payment references never reset.
    {"code": "payment_ref", "template": "PAY-{SEQ:6}", "scope": Scope.perpetual},
]


def register_default_series(registry: SeriesRegistry) -> SeriesRegistry:
    """
    Register the series used by the registration, application and payment modules.

    Deployments normally override these through the `series` section of config.yaml.
    """
    for entry in DEFAULT_SERIES:
        registry.register(SeriesDefinition.build(**entry))
    return registry
