import re
from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from flowycart.domain.config import ClientConfig
from flowycart.domain.errors import InvalidArgumentError, RequestError
from flowycart.domain.graphql import GraphQLRequestBody, GraphQLResponse
from flowycart.domain.interfaces import ITransport
from flowycart.infrastructure.transport import HttpTransport, TransportResult
from flowycart.shared.decorators import log_errors

_OPERATION_NAME = re.compile(r"\b(query|mutation)\s+([_A-Za-z][_0-9A-Za-z]*)")


def _operation_name(query: str) -> str:
    match = _OPERATION_NAME.search(query)
    return match.group(2) if match else "anonymous"


class FlowycartGraphQLClient:
    """Posts GraphQL documents to the Flowycart API and returns the ``data`` payload."""

    def __init__(self, config: ClientConfig, transport: ITransport | None = None) -> None:
        self._config = config
        self._transport = transport or HttpTransport(timeout=config.timeout)
        self._headers = {
            "Authorization": config.api_key,
            "Accept-Encoding": "gzip",
            "Content-Type": "application/json",
        }

    @log_errors
    def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> dict:
        """POST a GraphQL document and return the ``data`` payload.

        If the response carries an ``errors`` array the whole response is
        treated as failed, even when ``data`` is also present.

        Raises:
            InvalidArgumentError: if ``query`` is empty or ``variables`` is not a
                mapping that can be sent as JSON.
            RequestError: on transport failures, non-2xx responses, or GraphQL errors.
        """
        if query is None or query == "":
            raise InvalidArgumentError("query cannot be None or an empty string")
        if variables is None:
            variables = {}
        if not isinstance(variables, Mapping):
            raise InvalidArgumentError("variables must be a mapping")

        endpoint = self._config.graphql_endpoint
        try:
            payload = GraphQLRequestBody(query=query, variables=dict(variables)).payload()
        except (ValidationError, PydanticSerializationError) as exc:
            raise InvalidArgumentError(f"variables cannot be sent as JSON: {exc}") from exc
        logger.debug(f"GraphQL {_operation_name(query)} -> {endpoint}")

        result: TransportResult = self._transport.post(endpoint, self._headers, payload)
        logger.debug(f"GraphQL {_operation_name(query)} <- HTTP {result.http_status_code}")

        if not 200 <= result.http_status_code < 300:
            self._raise_for_http_error(result)

        response = self._parse(result)
        if response.errors is not None:
            # an errors key without entries is malformed, not a success
            message = response.error_message or _invalid_response_message(result)
            raise RequestError(
                message,
                status_code=result.http_status_code,
                errors=[error.model_dump() for error in response.errors],
            )
        if response.data is None:
            raise RequestError(
                _invalid_response_message(result), status_code=result.http_status_code
            )

        return response.data

    @staticmethod
    def _raise_for_http_error(result: TransportResult) -> None:
        if not result.error:
            raise RequestError(
                _invalid_response_message(result), status_code=result.http_status_code
            )
        raise RequestError(result.error_message, code=result.error_code)

    @staticmethod
    def _parse(result: TransportResult) -> GraphQLResponse:
        if not isinstance(result.response, dict):
            raise RequestError(
                _invalid_response_message(result), status_code=result.http_status_code
            )
        try:
            return GraphQLResponse.model_validate(result.response)
        except ValidationError:
            raise RequestError(
                _invalid_response_message(result), status_code=result.http_status_code
            ) from None


def _invalid_response_message(result: TransportResult) -> str:
    return (
        f"Invalid response from API: {result.raw_body} "
        f"(HTTP response code was {result.http_status_code})"
    )
