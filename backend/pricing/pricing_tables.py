"""
Static pricing tables for AWS, Azure and GCP.

Prices are simplified on-demand list prices in USD. Each table is keyed by
canonical Terraform resource type, then by size/class string. Sized resources
carry an hourly/monthly pair; storage resources carry a per-GB monthly rate.

All tables are read-only and shared across requests.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class PriceEntry:
    """Immutable price for one (provider, resource type, size) combination."""
    hourly: Optional[float] = None
    monthly: Optional[float] = None
    per_gb_monthly: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization, skipping unset rates."""
        result = {}
        if self.hourly is not None:
            result["hourly"] = self.hourly
        if self.monthly is not None:
            result["monthly"] = self.monthly
        if self.per_gb_monthly is not None:
            result["per_gb_monthly"] = self.per_gb_monthly
        return result


def _freeze(table: Dict[str, Dict[str, PriceEntry]]) -> Mapping[str, Mapping[str, PriceEntry]]:
    return MappingProxyType({
        resource_type: MappingProxyType(dict(sizes))
        for resource_type, sizes in table.items()
    })


AWS_PRICING = _freeze({
    "aws_instance": {
        "t3.nano": PriceEntry(hourly=0.0052, monthly=3.74),
        "t3.micro": PriceEntry(hourly=0.0104, monthly=7.49),
        "t3.small": PriceEntry(hourly=0.0208, monthly=14.98),
        "t3.medium": PriceEntry(hourly=0.0416, monthly=29.95),
        "t3.large": PriceEntry(hourly=0.0832, monthly=59.90),
        "t3.xlarge": PriceEntry(hourly=0.1664, monthly=119.81),
        "m5.large": PriceEntry(hourly=0.096, monthly=69.12),
        "m5.xlarge": PriceEntry(hourly=0.192, monthly=138.24),
        "c5.large": PriceEntry(hourly=0.085, monthly=61.20),
        "c5.xlarge": PriceEntry(hourly=0.17, monthly=122.40),
    },
    "aws_db_instance": {
        "db.t3.micro": PriceEntry(hourly=0.017, monthly=12.41),
        "db.t3.small": PriceEntry(hourly=0.034, monthly=24.82),
        "db.t3.medium": PriceEntry(hourly=0.068, monthly=49.64),
        "db.m5.large": PriceEntry(hourly=0.18, monthly=129.60),
        "db.m5.xlarge": PriceEntry(hourly=0.36, monthly=259.20),
    },
    "aws_s3_bucket": {
        "standard": PriceEntry(per_gb_monthly=0.023),
        "ia": PriceEntry(per_gb_monthly=0.0125),
        "glacier": PriceEntry(per_gb_monthly=0.004),
    },
    "aws_lb": {
        "application": PriceEntry(hourly=0.0225, monthly=16.20),
        "network": PriceEntry(hourly=0.0225, monthly=16.20),
    },
    "aws_nat_gateway": {
        "standard": PriceEntry(hourly=0.045, monthly=32.40),
    },
    "aws_vpc_endpoint": {
        "gateway": PriceEntry(hourly=0.01, monthly=7.20),
        "interface": PriceEntry(hourly=0.01, monthly=7.20),
    },
})

AZURE_PRICING = _freeze({
    "azurerm_linux_virtual_machine": {
        "Standard_B1s": PriceEntry(hourly=0.011, monthly=8.03),
        "Standard_B2s": PriceEntry(hourly=0.022, monthly=16.06),
        "Standard_D2s_v3": PriceEntry(hourly=0.096, monthly=69.12),
    },
    "azurerm_postgresql_server": {
        "B_Gen5_1": PriceEntry(hourly=0.034, monthly=24.82),
        "GP_Gen5_2": PriceEntry(hourly=0.068, monthly=49.64),
    },
    "azurerm_storage_account": {
        "standard": PriceEntry(per_gb_monthly=0.0184),
        "cool": PriceEntry(per_gb_monthly=0.01),
    },
    "azurerm_lb": {
        "basic": PriceEntry(hourly=0.025, monthly=18.25),
        "standard": PriceEntry(hourly=0.03, monthly=21.90),
    },
})

GCP_PRICING = _freeze({
    "google_compute_instance": {
        "e2-micro": PriceEntry(hourly=0.0076, monthly=5.47),
        "e2-small": PriceEntry(hourly=0.015, monthly=10.95),
        "n1-standard-1": PriceEntry(hourly=0.0475, monthly=34.68),
    },
    "google_sql_database_instance": {
        "db-f1-micro": PriceEntry(hourly=0.015, monthly=10.95),
        "db-g1-small": PriceEntry(hourly=0.027, monthly=19.71),
    },
    "google_storage_bucket": {
        "standard": PriceEntry(per_gb_monthly=0.02),
        "nearline": PriceEntry(per_gb_monthly=0.01),
    },
    "google_compute_forwarding_rule": {
        "standard": PriceEntry(hourly=0.025, monthly=18.25),
    },
})

PRICING_TABLES = MappingProxyType({
    "aws": AWS_PRICING,
    "azure": AZURE_PRICING,
    "gcp": GCP_PRICING,
})


def get_pricing_table(provider: str) -> Optional[Mapping[str, Mapping[str, PriceEntry]]]:
    """Return the read-only pricing table for a provider, or None if unsupported."""
    return PRICING_TABLES.get(provider)


def get_price_entry(provider: str, resource_type: str, size_key: str) -> Optional[PriceEntry]:
    """
    Look up the price for a canonical resource type and size.

    Args:
        provider: Cloud provider ("aws", "azure" or "gcp")
        resource_type: Canonical Terraform resource type (e.g. "aws_instance")
        size_key: Size/class string (e.g. "t3.micro", "standard")

    Returns:
        PriceEntry if the combination is priced, None otherwise.
        None means "no pricing available", which is not the same as free.
    """
    table = PRICING_TABLES.get(provider)
    if table is None:
        return None
    sizes = table.get(resource_type)
    if sizes is None:
        return None
    return sizes.get(size_key)
