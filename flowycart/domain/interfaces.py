from collections.abc import Mapping
from typing import Any, Protocol


class ITransport(Protocol):
    def post(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> Any:
        """Send one JSON POST and return a ``TransportResult``; never raises on 4xx/5xx."""
        ...
