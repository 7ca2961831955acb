"""Base-price arithmetic for services, packages and carts.

Unknown ids are priced at zero and logged; a stale reference in a checkout
must never stop the checkout from being priced.
"""

from collections.abc import Iterable, Mapping

from pricing.catalog.items import Package
from pricing.domain import logger
from pricing.utils.amounts import non_negative


def cart_subtotal(selected_ids: Iterable[str], prices: Mapping[str, float]) -> float:
    """Sum the base prices of the selected ids.

    Ids missing from ``prices`` contribute nothing. Negative prices are
    treated as zero.
    """
    subtotal = 0.0
    for item_id in selected_ids:
        if item_id not in prices:
            logger.warning("catalog_item_not_found", item_id=item_id)
            continue
        subtotal += non_negative(prices[item_id], "base_price")
    return subtotal


def package_price(
    package: Package | None,
    custom_service_ids: Iterable[str] = (),
    service_prices: Mapping[str, float] | None = None,
) -> float:
    """Price of a package including services added on top of its base services."""
    if package is None:
        return 0.0

    service_prices = service_prices or {}
    price = non_negative(package.price, "price")

    for service_id in custom_service_ids:
        if package.includes(service_id):
            continue
        if service_id not in service_prices:
            logger.warning(
                "package_customization_not_found",
                package_id=package.package_id,
                service_id=service_id,
            )
            continue
        price += non_negative(service_prices[service_id], "base_price")

    return price


def service_price_in_package(
    service_id: str,
    package: Package | None,
    service_prices: Mapping[str, float] | None = None,
) -> float:
    """Selling price of a service when sold as part of ``package``.

    The package's own price for the service wins; otherwise the catalog price
    applies. Services that are not part of the package are priced at zero.
    """
    if package is None or not package.includes(service_id):
        return 0.0

    override = (package.service_prices or {}).get(str(service_id))
    if override is not None:
        return non_negative(override, "package_selling_price")

    return non_negative((service_prices or {}).get(service_id), "base_price")


def total_duration(
    service_ids: Iterable[str],
    package_ids: Iterable[str],
    service_durations: Mapping[str, int],
    packages: Mapping[str, Package],
    customized_services: Mapping[str, Iterable[str]] | None = None,
) -> int:
    """Total appointment length in minutes for a selection of services and packages."""
    customized_services = customized_services or {}
    minutes = 0

    for service_id in service_ids:
        minutes += int(non_negative(service_durations.get(service_id), "duration_minutes"))

    for package_id in package_ids:
        package = packages.get(package_id)
        if package is None:
            logger.warning("catalog_package_not_found", package_id=package_id)
            continue

        if package.duration_minutes:
            minutes += package.duration_minutes
        else:
            minutes += sum(
                int(non_negative(service_durations.get(s), "duration_minutes")) for s in package.service_ids
            )

        for service_id in customized_services.get(package_id, ()):
            if not package.includes(service_id):
                minutes += int(non_negative(service_durations.get(service_id), "duration_minutes"))

    return minutes


def selection_subtotal(
    service_ids: Iterable[str],
    package_ids: Iterable[str],
    service_prices: Mapping[str, float],
    packages: Mapping[str, Package],
    customized_services: Mapping[str, Iterable[str]] | None = None,
) -> float:
    """Subtotal of selected services plus selected (possibly customized) packages."""
    customized_services = customized_services or {}
    subtotal = cart_subtotal(service_ids, service_prices)

    for package_id in package_ids:
        package = packages.get(package_id)
        if package is None:
            logger.warning("catalog_package_not_found", package_id=package_id)
            continue
        subtotal += package_price(package, customized_services.get(package_id, ()), service_prices)

    return subtotal
