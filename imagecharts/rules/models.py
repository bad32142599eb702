from pydantic import BaseModel, ConfigDict, Field, field_validator

from imagecharts.components.chart import PARAMETER_KEYS, ImageChartSettings
from imagecharts.components.chart._impl import USER_AGENT
from imagecharts.components.chart.models import (
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_PORT,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT_MS,
)


class ServiceRules(BaseModel):
    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    path: str = DEFAULT_PATH
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    user_agent: str = USER_AGENT

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> ImageChartSettings:
        return ImageChartSettings(
            host=self.host,
            scheme=self.scheme,
            port=self.port,
            path=self.path,
            timeout=self.timeout_ms,
        )


class ClientRules(BaseModel):
    service: ServiceRules = Field(default_factory=ServiceRules)
    # Chart parameters applied to every chart built from these rules
    defaults: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    @field_validator("defaults")
    @classmethod
    def known_parameters_only(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(v) - PARAMETER_KEYS)
        if unknown:
            raise ValueError(f"unknown chart parameters: {', '.join(unknown)}")
        return v
