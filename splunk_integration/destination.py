"""Destination URL assembly for HEC."""
from pydantic import BaseModel
from typing import Optional, Union

def build_query_string(
    source: Optional[str] = None,
    sourcetype: Optional[str] = None,
    index: Optional[str] = None,
) -> str:
    """Assemble the routing query string, e.g. ``?source=S&sourcetype=T``.

    Values are used as given; they must already be safe to put in a URL.
    """
    query = ""
    for name, value in (("source", source), ("sourcetype", sourcetype), ("index", index)):
        if value:
            query += ("&" if query else "?") + f"{name}={value}"
    return query

class Destination(BaseModel):
    """Resolved HEC endpoint. Built once per run."""
    scheme: str
    host: str
    port: int
    path: str
    source: Optional[str] = None
    sourcetype: Optional[str] = None
    index: Optional[str] = None
    override_url: Optional[str] = None

    class Config:
        frozen = True

    @property
    def base_url(self) -> str:
        """Endpoint URL without routing parameters."""
        if self.override_url:
            return self.override_url
        return f"{self.scheme}//{self.host}:{self.port}/{self.path}"

    @property
    def query_string(self) -> str:
        return build_query_string(self.source, self.sourcetype, self.index)

    @property
    def url(self) -> str:
        return self.base_url + self.query_string

def resolve_destination(
    protocol: str,
    host: str,
    port: Union[int, str],
    endpoint: str,
    source: Optional[str] = None,
    sourcetype: Optional[str] = None,
    index: Optional[str] = None,
    destination_url: Optional[str] = None,
) -> Destination:
    """Resolve the fully-qualified HEC destination.

    Args:
        protocol: ``http`` or ``https``, with or without the trailing colon
        host: HEC server host name
        port: HEC listener port
        endpoint: Collector path, e.g. ``services/collector/raw/1.0``
        source: Optional source override
        sourcetype: Optional sourcetype override
        index: Optional index override; the token must be allowed to write to it
        destination_url: Complete URL that replaces the assembled one

    Returns:
        Destination whose ``url`` carries the routing query string
    """
    scheme = protocol if protocol.endswith(":") else protocol + ":"
    return Destination(
        scheme=scheme,
        host=host,
        port=int(port),
        path=endpoint,
        source=source or None,
        sourcetype=sourcetype or None,
        index=index or None,
        override_url=destination_url or None,
    )
