"""Field-selection blocks interpolated into GraphQL documents."""

import re
from collections.abc import Iterable

from flowycart.domain.errors import InvalidArgumentError

# GraphQL Name grammar
_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


def select_fields(defaults: Iterable[str], extra: Iterable[str] | None = None) -> str:
    """Return ``defaults`` followed by ``extra`` as a space-separated selection.

    Every name must be a bare GraphQL identifier, so nothing but field names
    can reach the document. Repeated names keep their first position.

    Raises:
        InvalidArgumentError: if ``extra`` is a string or holds a non-identifier.
    """
    if isinstance(extra, str):
        raise InvalidArgumentError("extra_return_fields must be a list of field names, not a string")

    selected: list[str] = []
    for name in [*defaults, *(extra or ())]:
        if not isinstance(name, str) or not _NAME.fullmatch(name):
            raise InvalidArgumentError(f"Invalid GraphQL field name: {name!r}")
        if name not in selected:
            selected.append(name)
    return " ".join(selected)
