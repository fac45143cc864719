import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from flowycart.domain.errors import InvalidArgumentError

DEFAULT_API_BASE = "https://api.flowycart.com/api"
DEFAULT_TIMEOUT = 30.0

_WHITESPACE = re.compile(r"\s")


class ClientConfig(BaseModel):
    """Validated, immutable settings held by a client for its whole lifetime.

    Options:

    - ``api_key``: the Flowycart API key, sent as the ``Authorization`` header.
    - ``client_id``: the Flowycart client ID, used in OAuth requests.
    - ``api_base``: base URL for API requests. Defaults to
      :data:`DEFAULT_API_BASE`; only worth changing to target a mock server.
    - ``timeout``: seconds before the HTTP call is abandoned, ``None`` to wait forever.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str
    client_id: str | None = None
    api_base: str = DEFAULT_API_BASE
    timeout: float | None = DEFAULT_TIMEOUT

    def __init__(self, **data: Any) -> None:
        super().__init__(**_checked(data))

    @property
    def graphql_endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/graphql/"

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        return {
            "api_key": None,
            "client_id": None,
            "api_base": DEFAULT_API_BASE,
            "timeout": DEFAULT_TIMEOUT,
        }

    @classmethod
    def from_raw(cls, raw: "str | Mapping[str, Any] | ClientConfig") -> "ClientConfig":
        """Build a config from an API key string or a mapping of options.

        An existing ``ClientConfig`` is checked again and returned as-is, so
        instances made with ``model_construct`` cannot skip the rules.

        Raises:
            InvalidArgumentError: on the first rule the input breaks.
        """
        if isinstance(raw, ClientConfig):
            _checked(raw.model_dump())
            return raw
        if isinstance(raw, str):
            raw = {"api_key": raw}
        elif not isinstance(raw, Mapping):
            raise InvalidArgumentError("config must be a string or a mapping")

        return cls(**_checked(raw))


def _checked(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``raw`` over the defaults and apply every rule in order."""
    defaults = ClientConfig.defaults()
    unknown = [str(key) for key in raw if key not in defaults]
    if unknown:
        raise InvalidArgumentError(
            f"Found unknown key(s) in configuration: {','.join(unknown)}"
        )

    merged = {**defaults, **raw}
    _validate(merged)
    return merged


def _validate(config: dict[str, Any]) -> None:
    api_key = config["api_key"]
    if api_key is None:
        raise InvalidArgumentError("api_key cannot be None")
    if not isinstance(api_key, str):
        raise InvalidArgumentError("api_key must be a string")
    if api_key == "":
        raise InvalidArgumentError("api_key cannot be the empty string")
    if _WHITESPACE.search(api_key):
        raise InvalidArgumentError("api_key cannot contain whitespace")

    client_id = config["client_id"]
    if client_id is not None and not isinstance(client_id, str):
        raise InvalidArgumentError("client_id must be None or a string")

    if not isinstance(config["api_base"], str):
        raise InvalidArgumentError("api_base must be a string")

    timeout = config["timeout"]
    # bool is an int subclass; reject it explicitly
    if timeout is not None and (
        isinstance(timeout, bool)
        or not isinstance(timeout, int | float)
        or timeout <= 0
    ):
        raise InvalidArgumentError("timeout must be None or a positive number")
