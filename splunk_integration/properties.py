"""Java-style ``.properties`` file support for uploader settings."""
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type
import structlog

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = structlog.get_logger()

# properties key -> settings field
PROPERTY_KEYS = {
    "hec-protocol": "protocol",
    "hec-server": "host",
    "hec-port": "port",
    "hec-endpoint": "endpoint",
    "hec-token": "token",
    "hec-index": "index",
    "hec-source": "source",
    "hec-sourcetype": "sourcetype",
    "hec-url": "destination_url",
    "hec-channel": "channel",
    "hec-block-size": "block_size",
    "hec-log-level": "log_level",
    "hec-log-format": "log_format",
}


def read_properties(path: str) -> Dict[str, str]:
    """Parse ``key=value`` / ``key: value`` lines, skipping ``#`` and ``!`` comments.

    A trailing backslash continues the value on the next line.
    """
    properties: Dict[str, str] = {}
    pending = ""
    with open(path, encoding="utf-8") as f:
        for raw_line in f:
            line = pending + raw_line.strip() if pending else raw_line.strip()
            if line.endswith("\\"):
                pending = line[:-1]
                continue
            pending = ""
            if not line or line[0] in "#!":
                continue
            positions = [pos for pos in (line.find("="), line.find(":")) if pos >= 0]
            if not positions:
                properties[line] = ""
                continue
            split_at = min(positions)
            properties[line[:split_at].strip()] = line[split_at + 1:].strip()
    if pending:
        logger.warning("Properties file ends with a dangling line continuation", path=path)
    return properties


class PropertiesFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a ``splunkutils.properties`` style file."""

    def __init__(self, settings_cls: Type[BaseSettings], path: Optional[str]):
        super().__init__(settings_cls)
        self.path = path
        self._values = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path:
            return {}
        if not Path(self.path).is_file():
            logger.warning("Properties file not found; using parameters and defaults", path=self.path)
            return {}

        properties = read_properties(self.path)
        if not properties:
            logger.warning("Properties file found but was empty", path=self.path)
            return {}

        unknown = sorted(key for key in properties if key not in PROPERTY_KEYS)
        if unknown:
            logger.warning("Ignoring unknown properties", path=self.path, keys=unknown)
        logger.debug("Properties file loaded", path=self.path)
        return {
            PROPERTY_KEYS[key]: value
            for key, value in properties.items()
            if key in PROPERTY_KEYS
        }

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return dict(self._values)
