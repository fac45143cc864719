"""
GraphQL documents sent by FlowycartClient.

``{fields}`` is replaced with a selection built by
:func:`flowycart.shared.fields.select_fields`; the rest is static.
"""

CREATE_ORDER_MUTATION = """
mutation createOrder($orderInput: OrderInputType!) {
  createOrder(order: $orderInput) {
    id
    status
    order {
      {fields}
    }
  }
}
"""

CREATE_CUSTOMER_MUTATION = """
mutation createCustomer($customerInput: CustomerInputType!) {
  createCustomer(customer: $customerInput) {
    customer {
      {fields}
    }
    status
  }
}
"""

CONNECT_MERCHANT_MUTATION = """
mutation connectMerchant($baseUrl: String!, $vendor: String!) {
  connectMerchant(baseUrl: $baseUrl, vendor: $vendor) {
    status
    token
  }
}
"""

COUNTRIES_QUERY = """
query countries {
  countries {
    {fields}
  }
}
"""

ZONES_QUERY = """
query zones($countryId: String!) {
  zones(countryId: $countryId) {
    {fields}
  }
}
"""

ORDER_DEFAULT_FIELDS = ("id",)
CUSTOMER_DEFAULT_FIELDS = ("id",)
COUNTRY_DEFAULT_FIELDS = ("id", "name", "codeIso2", "codeIso3")
ZONE_DEFAULT_FIELDS = ("id", "name", "code")


def render(document: str, fields: str) -> str:
    """Substitute the selection into ``document``.

    ``str.format`` is not used because GraphQL braces would need escaping.
    """
    return document.replace("{fields}", fields)
