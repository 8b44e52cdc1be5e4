"""HEC uploader configuration."""
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing import Any, Literal, Optional, Tuple, Type
import structlog

from shared.exceptions import ConfigurationError
from splunk_integration.destination import Destination, resolve_destination
from splunk_integration.models import DEFAULT_BLOCK_SIZE, MAX_PAYLOAD_BYTES
from splunk_integration.properties import PropertiesFileSettingsSource

logger = structlog.get_logger()

DEFAULT_PROPERTIES_FILE = "splunkutils.properties"

class HECSettings(BaseSettings):
    """HEC uploader configuration.

    Sources, highest priority first: constructor arguments (the command line),
    environment variables, ``.env``, the properties file, built-in defaults.
    """
    protocol: str = "http:"
    host: str = "localhost"
    port: int = 8088
    endpoint: str = "services/collector/raw/1.0"
    token: str = ""
    index: Optional[str] = None
    source: Optional[str] = None
    sourcetype: Optional[str] = None
    # Complete URL; replaces protocol/host/port/endpoint when set
    destination_url: Optional[str] = None
    channel: Optional[str] = None
    block_size: int = Field(default=DEFAULT_BLOCK_SIZE, gt=0, le=MAX_PAYLOAD_BYTES)
    strict_records: bool = False
    fail_on_http_error: bool = False
    verify: bool = True
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    properties_file: Optional[str] = DEFAULT_PROPERTIES_FILE

    class Config:
        env_file = ".env"
        env_prefix = "SPLUNK_HEC_"
        extra = "ignore"
        frozen = True

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        path = init_kwargs.get("properties_file", settings_cls.model_fields["properties_file"].default)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PropertiesFileSettingsSource(settings_cls, path),
        )

    def is_configured(self) -> bool:
        """Check if a token is available to authenticate with HEC."""
        return bool(self.token)

    def destination(self) -> Destination:
        """Resolve the destination these settings point at."""
        return resolve_destination(
            protocol=self.protocol,
            host=self.host,
            port=self.port,
            endpoint=self.endpoint,
            source=self.source,
            sourcetype=self.sourcetype,
            index=self.index,
            destination_url=self.destination_url,
        )

def load_settings(properties_file: Optional[str] = DEFAULT_PROPERTIES_FILE, **overrides: Any) -> HECSettings:
    """Build settings once, layering ``overrides`` over every other source.

    Overrides whose value is ``None`` are treated as not given, so argparse
    results can be passed through directly.
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    try:
        return HECSettings(properties_file=properties_file, **given)
    except ValidationError as e:
        logger.error("Invalid HEC settings", error=str(e))
        raise ConfigurationError(f"Invalid HEC settings: {e}") from e
