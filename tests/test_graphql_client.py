"""Tests for FlowycartGraphQLClient.execute and the httpx transport beneath it."""

import json
from collections.abc import Callable
from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest

from flowycart.domain.config import ClientConfig
from flowycart.domain.errors import InvalidArgumentError, RequestError
from flowycart.domain.graphql import GraphQLRequestBody, GraphQLResponse
from flowycart.infrastructure.graphql_client import FlowycartGraphQLClient
from flowycart.infrastructure.transport import (
    CURLE_COULDNT_CONNECT,
    CURLE_OPERATION_TIMEDOUT,
    HttpTransport,
    TransportResult,
)

QUERY = "query countries { countries { id } }"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> FlowycartGraphQLClient:
    """Helper: executor wired to an httpx.MockTransport."""
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    config = ClientConfig.from_raw({"api_key": "sk_test", "api_base": "http://mock/api"})
    return FlowycartGraphQLClient(config, HttpTransport(client=http_client))


def _respond(status_code: int = 200, **kwargs) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, **kwargs)


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


def test_execute_posts_query_and_variables_with_headers() -> None:
    """The request goes to <api_base>/graphql/ with the auth, gzip and JSON headers."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"data": {"zones": []}})

    _client(handler).execute(QUERY, {"countryId": "c1"})

    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "http://mock/api/graphql/"
    assert request.headers["Authorization"] == "sk_test"
    assert request.headers["Accept-Encoding"] == "gzip"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"query": QUERY, "variables": {"countryId": "c1"}}


def test_execute_sends_empty_variables_by_default() -> None:
    """Omitted variables are sent as an empty object."""
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {}})

    _client(handler).execute(QUERY)

    assert captured[0]["variables"] == {}


def test_execute_returns_data() -> None:
    """A clean response returns the data payload as-is."""
    data = {"countries": [{"id": "1", "name": "Spain"}]}

    assert _client(_respond(json={"data": data})).execute(QUERY) == data


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("variables", [None, {}, {"a": 1}, [], "x"])
def test_empty_query_is_rejected(variables: object) -> None:
    """An empty query fails before anything is sent, whatever the variables."""
    transport = MagicMock(spec=HttpTransport)
    executor = FlowycartGraphQLClient(ClientConfig.from_raw("sk_test"), transport)

    with pytest.raises(InvalidArgumentError, match="query"):
        executor.execute("", variables)  # type: ignore[arg-type]

    transport.post.assert_not_called()


def test_none_query_is_rejected() -> None:
    executor = FlowycartGraphQLClient(ClientConfig.from_raw("sk_test"), MagicMock(spec=HttpTransport))

    with pytest.raises(InvalidArgumentError):
        executor.execute(None)  # type: ignore[arg-type]


@pytest.mark.parametrize("variables", [["a"], "a=1", 3])
def test_non_mapping_variables_are_rejected(variables: object) -> None:
    transport = MagicMock(spec=HttpTransport)
    executor = FlowycartGraphQLClient(ClientConfig.from_raw("sk_test"), transport)

    with pytest.raises(InvalidArgumentError, match="variables"):
        executor.execute(QUERY, variables)  # type: ignore[arg-type]

    transport.post.assert_not_called()


@pytest.mark.parametrize("variables", [{"o": object()}, {1: "a"}])
def test_unserializable_variables_are_rejected(variables: dict) -> None:
    """Variables without a JSON form fail with an SDK error before sending."""
    transport = MagicMock(spec=HttpTransport)
    executor = FlowycartGraphQLClient(ClientConfig.from_raw("sk_test"), transport)

    with pytest.raises(InvalidArgumentError, match="JSON"):
        executor.execute(QUERY, variables)

    transport.post.assert_not_called()


def test_decimal_variables_are_sent_as_numbers() -> None:
    """Decimal amounts reach the API as JSON numbers, nested ones included."""
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {}})

    _client(handler).execute(
        QUERY, {"amount": Decimal("12.5"), "items": [{"amount": Decimal("3")}]}
    )

    assert captured[0]["variables"] == {"amount": 12.5, "items": [{"amount": 3.0}]}


def test_request_body_payload_is_json_ready() -> None:
    body = GraphQLRequestBody(query=QUERY, variables={"rate": Decimal("0.21"), "tags": ("a",)})

    assert body.payload() == {"query": QUERY, "variables": {"rate": 0.21, "tags": ["a"]}}


# ---------------------------------------------------------------------------
# HTTP failures
# ---------------------------------------------------------------------------


def test_http_404_reports_body_and_status_code() -> None:
    """A non-2xx response without transport error quotes the body and code."""
    executor = _client(_respond(404, text="Not Found"))

    with pytest.raises(RequestError) as exc_info:
        executor.execute(QUERY)

    assert str(exc_info.value) == "Invalid response from API: Not Found (HTTP response code was 404)"
    assert exc_info.value.status_code == 404


def test_http_500_with_json_body_is_a_request_error() -> None:
    executor = _client(_respond(500, json={"detail": "boom"}))

    with pytest.raises(RequestError, match="500"):
        executor.execute(QUERY)


def test_connect_error_carries_message_and_code() -> None:
    """Connectivity failures surface the transport's message and error code."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(RequestError) as exc_info:
        _client(handler).execute(QUERY)

    assert str(exc_info.value) == "Connection refused"
    assert exc_info.value.code == CURLE_COULDNT_CONNECT


def test_transport_error_result_uses_adapter_fields() -> None:
    """The executor relays error_message and error_code from any transport."""
    transport = MagicMock(spec=HttpTransport)
    transport.post.return_value = TransportResult(
        error=True, error_message="Operation timed out", error_code=CURLE_OPERATION_TIMEDOUT
    )
    executor = FlowycartGraphQLClient(ClientConfig.from_raw("sk_test"), transport)

    with pytest.raises(RequestError) as exc_info:
        executor.execute(QUERY)

    assert str(exc_info.value) == "Operation timed out"
    assert exc_info.value.code == CURLE_OPERATION_TIMEDOUT


# ---------------------------------------------------------------------------
# GraphQL errors
# ---------------------------------------------------------------------------


def test_graphql_errors_are_joined_by_newline() -> None:
    """Error messages are joined in order; data is ignored when errors exist."""
    body = {"data": {"countries": []}, "errors": [{"message": "A"}, {"message": "B"}]}

    with pytest.raises(RequestError) as exc_info:
        _client(_respond(json=body)).execute(QUERY)

    assert str(exc_info.value) == "A\nB"
    assert [error["message"] for error in exc_info.value.errors] == ["A", "B"]


def test_single_graphql_error_keeps_extra_fields() -> None:
    body = {"errors": [{"message": "Unauthorized", "path": ["countries"]}]}

    with pytest.raises(RequestError) as exc_info:
        _client(_respond(json=body)).execute(QUERY)

    assert str(exc_info.value) == "Unauthorized"
    assert exc_info.value.errors[0]["path"] == ["countries"]


def test_empty_errors_array_is_not_a_success() -> None:
    """An errors key is a failure even with no entries; data is not returned."""
    body = {"data": {"countries": [1]}, "errors": []}

    with pytest.raises(RequestError, match="Invalid response from API") as exc_info:
        _client(_respond(json=body)).execute(QUERY)

    assert exc_info.value.errors == []


def test_error_without_message_keeps_the_other_messages() -> None:
    """A null or non-string message does not hide the rest of the errors."""
    body = {"errors": [{"message": None}, {"message": "Forbidden"}, {"message": 42}]}

    with pytest.raises(RequestError) as exc_info:
        _client(_respond(json=body)).execute(QUERY)

    assert str(exc_info.value) == "Unknown GraphQL error\nForbidden\n42"


def test_response_model_tolerates_missing_messages() -> None:
    response = GraphQLResponse.model_validate({"errors": [{"path": ["zones"]}]})

    assert response.error_message == "Unknown GraphQL error"


# ---------------------------------------------------------------------------
# Malformed 2xx responses
# ---------------------------------------------------------------------------


def test_non_json_success_body_is_a_request_error() -> None:
    """A 2xx body that is not a GraphQL envelope is never returned."""
    with pytest.raises(RequestError, match="HTTP response code was 200"):
        _client(_respond(200, text="<html>maintenance</html>")).execute(QUERY)


def test_missing_data_is_a_request_error() -> None:
    with pytest.raises(RequestError, match="Invalid response from API"):
        _client(_respond(json={"data": None})).execute(QUERY)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def test_transport_does_not_raise_on_http_errors() -> None:
    """4xx/5xx are reported through http_status_code, not exceptions."""
    http_client = httpx.Client(transport=httpx.MockTransport(_respond(503, text="down")))
    result = HttpTransport(client=http_client).post(
        "http://mock/api/graphql/", {}, {"query": QUERY, "variables": {}}
    )

    assert result.http_status_code == 503
    assert result.error is False
    assert result.response == "down"
    assert result.raw_body == "down"


def test_transport_decodes_json_bodies() -> None:
    http_client = httpx.Client(transport=httpx.MockTransport(_respond(json={"data": {"a": 1}})))
    result = HttpTransport(client=http_client).post(
        "http://mock/api/graphql/", {}, {"query": QUERY, "variables": {}}
    )

    assert result.response == {"data": {"a": 1}}


def test_transport_maps_timeouts_to_error_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    result = HttpTransport(client=http_client).post(
        "http://mock/api/graphql/", {}, {"query": QUERY, "variables": {}}
    )

    assert result.error is True
    assert result.http_status_code == 0
    assert result.error_message == "timed out"
    assert result.error_code == CURLE_OPERATION_TIMEDOUT
