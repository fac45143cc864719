from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel

from flowycart.domain.config import ClientConfig
from flowycart.domain.errors import DomainError, InvalidArgumentError, RequestError
from flowycart.domain.inputs import CustomerInput, OrderInput, to_variables
from flowycart.domain.interfaces import ITransport
from flowycart.infrastructure import documents
from flowycart.infrastructure.graphql_client import FlowycartGraphQLClient
from flowycart.shared.decorators import log_errors
from flowycart.shared.fields import select_fields


def _payload(data: Mapping[str, Any], name: str) -> Any:
    """Return ``data[name]``, failing loudly if the API left it out."""
    if name not in data:
        raise RequestError(f"Invalid response from API: missing '{name}' in data")
    return data[name]


def _mutation_result(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    result = _payload(data, name)
    if not isinstance(result, Mapping):
        raise RequestError(f"Invalid response from API: '{name}' is {result!r}")
    return result


def _input_variables(params: OrderInput | CustomerInput | Mapping[str, Any]) -> dict:
    if not isinstance(params, BaseModel | Mapping):
        raise InvalidArgumentError("params must be a mapping or an input model")
    return to_variables(params)


class FlowycartClient:
    """Client for Flowycart's GraphQL API.

    ``config`` is either the API key as a string or a mapping of
    :class:`~flowycart.domain.config.ClientConfig` options (``api_key``,
    ``client_id``, ``api_base``, ``timeout``)::

        client = FlowycartClient("sk_123")
        client = FlowycartClient({"api_key": "sk_123", "api_base": "http://localhost:8000/api"})

    Every method either returns the full payload it promises or raises a
    :class:`~flowycart.domain.errors.FlowycartError`.
    """

    def __init__(
        self,
        config: str | Mapping[str, Any] | ClientConfig,
        transport: ITransport | None = None,
    ) -> None:
        self._config = ClientConfig.from_raw(config)
        self._graphql = FlowycartGraphQLClient(self._config, transport)

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def api_base(self) -> str:
        return self._config.api_base

    @property
    def client_id(self) -> str | None:
        return self._config.client_id

    @property
    def config(self) -> ClientConfig:
        return self._config

    def graphql_request(self, query: str, variables: Mapping[str, Any] | None = None) -> dict:
        """Send an arbitrary GraphQL document and return its ``data`` payload."""
        return self._graphql.execute(query, variables)

    @log_errors
    def create_order(
        self,
        params: OrderInput | Mapping[str, Any],
        extra_return_fields: Iterable[str] | None = None,
    ) -> dict:
        """Create an order and return the selected fields of the new order.

        ``params`` follows the API's ``OrderInputType`` (refId, intent, items,
        currency, currencyValue, successUrl, cancelUrl, customerId, metadata),
        either as a mapping with those keys or as an :class:`OrderInput`.

        Only ``id`` is returned unless ``extra_return_fields`` asks for more.
        Nested objects in the result are returned as the API sent them.

        Raises:
            DomainError: if the API did not create the order; the message is
                the ``status`` it reported.
        """
        fields = select_fields(documents.ORDER_DEFAULT_FIELDS, extra_return_fields)
        variables = {"orderInput": _input_variables(params)}

        data = self._graphql.execute(
            documents.render(documents.CREATE_ORDER_MUTATION, fields), variables
        )

        result = _mutation_result(data, "createOrder")
        if result.get("id") is None:
            raise DomainError("createOrder", result.get("status"))

        order = result.get("order")
        if not isinstance(order, Mapping):
            raise RequestError(f"Invalid response from API: createOrder.order is {order!r}")

        logger.info(f"[Flowycart] Order {result['id']} created")
        return dict(order)

    @log_errors
    def create_customer(
        self,
        params: CustomerInput | Mapping[str, Any],
        extra_return_fields: Iterable[str] | None = None,
    ) -> dict:
        """Create a customer and return the selected fields of the new customer.

        ``params`` follows the API's ``CustomerInputType`` (refId, firstName,
        lastName, email, addresses). An address with an ``id`` updates that
        address instead of adding one.

        Raises:
            DomainError: if the API returned no customer.
        """
        fields = select_fields(documents.CUSTOMER_DEFAULT_FIELDS, extra_return_fields)
        variables = {"customerInput": _input_variables(params)}

        data = self._graphql.execute(
            documents.render(documents.CREATE_CUSTOMER_MUTATION, fields), variables
        )

        result = _mutation_result(data, "createCustomer")
        customer = result.get("customer")
        if customer is None:
            raise DomainError("createCustomer", result.get("status"))
        if not isinstance(customer, Mapping):
            raise RequestError(f"Invalid response from API: createCustomer.customer is {customer!r}")

        logger.info(f"[Flowycart] Customer {customer.get('id')} created")
        return dict(customer)

    @log_errors
    def connect_merchant(self, base_url: str, vendor: str) -> dict:
        """Register the shop with Flowycart and return ``{"token": ...}``.

        The token is what the shop uses to verify Flowycart's callback
        requests. ``base_url`` is where the shop's callback endpoints live and
        ``vendor`` names the platform, e.g. ``"Magento"``.
        """
        variables = {"baseUrl": base_url, "vendor": vendor}
        data = self._graphql.execute(documents.CONNECT_MERCHANT_MUTATION, variables)

        result = _mutation_result(data, "connectMerchant")
        token = result.get("token")
        if not token:
            raise DomainError("connectMerchant", result.get("status"))

        logger.info(f"[Flowycart] Merchant {vendor} connected at {base_url}")
        return {"token": token}

    @log_errors
    def get_countries(self, extra_return_fields: Iterable[str] | None = None) -> list[dict]:
        """Return every country known to Flowycart (id, name, codeIso2, codeIso3 by default)."""
        fields = select_fields(documents.COUNTRY_DEFAULT_FIELDS, extra_return_fields)
        data = self._graphql.execute(documents.render(documents.COUNTRIES_QUERY, fields))
        return _payload(data, "countries")

    @log_errors
    def get_zones(
        self, country_id: str, extra_return_fields: Iterable[str] | None = None
    ) -> list[dict]:
        """Return the zones of ``country_id`` (id, name, code by default)."""
        fields = select_fields(documents.ZONE_DEFAULT_FIELDS, extra_return_fields)
        data = self._graphql.execute(
            documents.render(documents.ZONES_QUERY, fields), {"countryId": country_id}
        )
        return _payload(data, "zones")
