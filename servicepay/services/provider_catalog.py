"""Display metadata for utility providers and months."""

from typing import NamedTuple

from servicepay.models.service_account import ServiceCategory, ServiceProvider


class ProviderInfo(NamedTuple):
    """How a provider is presented on the dashboard."""

    display_name: str
    category: ServiceCategory
    icon: str
    color: str


PROVIDER_INFO: dict[ServiceProvider, ProviderInfo] = {
    ServiceProvider.AYSAM: ProviderInfo("AYSAM", ServiceCategory.WATER, "droplet", "blue"),
    ServiceProvider.ECOGAS_CUYANA: ProviderInfo(
        "ECOGAS CUYANA", ServiceCategory.GAS, "flame", "orange"
    ),
    ServiceProvider.EDEMSA: ProviderInfo("EDEMSA", ServiceCategory.ELECTRICITY, "zap", "yellow"),
}

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def get_provider_info(provider: ServiceProvider | str) -> ProviderInfo:
    """Look up display metadata for a provider (enum member or its value)."""
    return PROVIDER_INFO[ServiceProvider(provider)]


def month_name(month: int) -> str:
    """Three-letter English month abbreviation for a 1-based month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    return MONTH_NAMES[month - 1]


__all__ = [
    "MONTH_NAMES",
    "PROVIDER_INFO",
    "ProviderInfo",
    "get_provider_info",
    "month_name",
]
