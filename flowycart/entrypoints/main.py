import sys

from loguru import logger

from flowycart.application.client import FlowycartClient
from flowycart.entrypoints.settings import Settings


def main(settings: Settings | None = None) -> None:
    settings = settings or Settings()  # type: ignore[call-arg]

    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    client = FlowycartClient(settings.client_config())
    logger.info(f"Fetching countries from {client.api_base}…")

    countries = client.get_countries()
    logger.info(f"Found {len(countries)} country(ies).")
    for country in countries:
        logger.debug(f"{country.get('codeIso2')} | {country.get('name')} | {country.get('id')}")


if __name__ == "__main__":
    main()
