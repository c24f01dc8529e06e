"""Process configuration for Korea transit queries."""

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
CHARACTER_LIMIT = 25000

SEOUL_API_KEY_ENV = "SEOUL_API_KEY"
DATA_GO_KR_API_KEY_ENV = "DATA_GO_KR_API_KEY"
TIMEOUT_ENV = "KOREA_TRANSIT_TIMEOUT"
CHARACTER_LIMIT_ENV = "KOREA_TRANSIT_CHARACTER_LIMIT"


class TransitSettings(BaseModel):
    """Credentials, upstream hosts and output bounds."""

    seoul_api_key: str = Field("", description="Seoul Open Data API key")
    data_go_kr_api_key: str = Field("", description="data.go.kr service key")
    subway_base_url: str = Field(
        "http://swopenapi.seoul.go.kr/api/subway",
        description="Realtime subway arrival host",
    )
    open_api_base_url: str = Field(
        "http://openapi.seoul.go.kr:8088",
        description="Seoul Open Data host serving the directory feeds",
    )
    bus_arrival_url: str = Field(
        "http://ws.bus.go.kr/api/rest/stationinfo/getStationByUid",
        description="Bus arrival endpoint keyed by stop number",
    )
    timeout: float = Field(
        DEFAULT_TIMEOUT_SECONDS, gt=0, description="Per-fetch budget in seconds"
    )
    character_limit: int = Field(
        CHARACTER_LIMIT, gt=100, description="Maximum length of a markdown response"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TransitSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Settings with unset variables left at their defaults

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        values: dict[str, object] = {
            "seoul_api_key": env.get(SEOUL_API_KEY_ENV, ""),
            "data_go_kr_api_key": env.get(DATA_GO_KR_API_KEY_ENV, ""),
        }
        if env.get(TIMEOUT_ENV):
            values["timeout"] = env[TIMEOUT_ENV]
        if env.get(CHARACTER_LIMIT_ENV):
            values["character_limit"] = env[CHARACTER_LIMIT_ENV]

        try:
            settings = cls.model_validate(values)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid transit configuration: {e}") from e

        if not settings.seoul_api_key:
            logger.warning(
                f"{SEOUL_API_KEY_ENV} is not set; Seoul feeds will reject requests"
            )
        return settings

    def masked(self) -> dict[str, object]:
        """Return settings for display with credentials hidden."""
        data = self.model_dump()
        for key in ("seoul_api_key", "data_go_kr_api_key"):
            value = data[key]
            data[key] = f"{value[:4]}****" if value else "(not set)"
        return data
