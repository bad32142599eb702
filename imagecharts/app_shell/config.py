import logging
import os
from collections.abc import Mapping
from pathlib import Path

import httpx

from imagecharts.adapters.http.client import HttpxChartTransport
from imagecharts.components.chart import ImageChart, ImageChartSettings
from imagecharts.rules.loader import load_rules
from imagecharts.rules.models import ClientRules

logger = logging.getLogger(__name__)

ENV_PREFIX = "IMAGECHARTS_"

# env var suffix -> ServiceRules field
ENV_FIELDS = {
    "SCHEME": "scheme",
    "HOST": "host",
    "PORT": "port",
    "PATH": "path",
    "TIMEOUT_MS": "timeout_ms",
}


def resolve_rules(
    rules_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> ClientRules:
    """
    Load rules from file (or defaults) and layer IMAGECHARTS_* env vars on top.
    Raises ValueError if an override does not validate.
    """
    environ = os.environ if environ is None else environ
    rules = load_rules(rules_path) if rules_path else ClientRules()

    overrides = {
        field: environ[ENV_PREFIX + suffix]
        for suffix, field in ENV_FIELDS.items()
        if environ.get(ENV_PREFIX + suffix)
    }
    if not overrides:
        return rules

    logger.debug("Service overrides from environment: %s", sorted(overrides))
    service = rules.service.model_dump()
    service.update(overrides)
    return rules.model_validate({"service": service, "defaults": rules.defaults})


def resolve_settings(
    rules_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> ImageChartSettings:
    return resolve_rules(rules_path, environ).service.to_settings()


def chart_from_rules(
    rules: ClientRules, transport: httpx.AsyncBaseTransport | None = None
) -> ImageChart:
    """Create a chart bound to the rules' service, pre-filled with their defaults."""
    chart = ImageChart(
        rules.service.to_settings(),
        transport=HttpxChartTransport(
            transport=transport, user_agent=rules.service.user_agent
        ),
    )
    for key, value in rules.defaults.items():
        chart.set(key, value)
    return chart
