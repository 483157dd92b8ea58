"""
Resource catalog: how each diagram node type is priced.

Every provider has a table of canonical resource types (Terraform names) with
the rule used to price them, plus an alias map that folds the short names used
by the diagram palette (e.g. "ec2") onto the canonical type (e.g.
"aws_instance").
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


# Pricing kinds
SIZED = "sized"  # monthly rate per instance, selected by size/class
STORAGE = "storage"  # per-GB monthly rate, selected by storage class
FREE = "free"  # structural networking primitive with no charge


@dataclass(frozen=True)
class ResourceSpec:
    """Declarative pricing rule for one canonical resource type."""
    canonical_type: str
    display_name: str
    kind: str
    size_fields: Tuple[str, ...] = ()
    default_size: Optional[str] = None
    label_size: bool = True  # Whether the size shows up as instanceType in the breakdown


def _catalog(*specs: ResourceSpec) -> Mapping[str, ResourceSpec]:
    return MappingProxyType({spec.canonical_type: spec for spec in specs})


AWS_RESOURCES = _catalog(
    ResourceSpec("aws_instance", "EC2 Instance", SIZED, ("instanceType", "instanceClass"), "t3.micro"),
    ResourceSpec("aws_db_instance", "RDS Instance", SIZED, ("instanceClass", "instanceType"), "db.t3.micro"),
    ResourceSpec("aws_s3_bucket", "S3 Storage", STORAGE),
    ResourceSpec("aws_lb", "Load Balancer", SIZED, ("loadBalancerType",), "application"),
    ResourceSpec("aws_nat_gateway", "NAT Gateway", SIZED, (), "standard", label_size=False),
    ResourceSpec("aws_vpc_endpoint", "VPC Endpoint", SIZED, ("endpointType",), "gateway"),
    ResourceSpec("aws_vpc", "VPC", FREE),
    ResourceSpec("aws_subnet", "Subnet", FREE),
    ResourceSpec("aws_internet_gateway", "Internet Gateway", FREE),
    ResourceSpec("aws_route_table", "Route Table", FREE),
    ResourceSpec("aws_security_group", "Security Group", FREE),
)

AZURE_RESOURCES = _catalog(
    ResourceSpec("azurerm_linux_virtual_machine", "Linux VM", SIZED, ("instanceType", "instanceClass"), "Standard_B1s"),
    ResourceSpec("azurerm_postgresql_server", "PostgreSQL Server", SIZED, ("instanceClass", "instanceType"), "B_Gen5_1"),
    ResourceSpec("azurerm_storage_account", "Storage Account", STORAGE),
    ResourceSpec("azurerm_lb", "Load Balancer", SIZED, ("loadBalancerType",), "basic"),
    ResourceSpec("azurerm_virtual_network", "Virtual Network", FREE),
    ResourceSpec("azurerm_subnet", "Subnet", FREE),
    ResourceSpec("azurerm_route_table", "Route Table", FREE),
    ResourceSpec("azurerm_network_security_group", "Network Security Group", FREE),
)

GCP_RESOURCES = _catalog(
    ResourceSpec("google_compute_instance", "Compute Engine", SIZED, ("instanceType", "instanceClass"), "e2-micro"),
    ResourceSpec("google_sql_database_instance", "Cloud SQL", SIZED, ("instanceClass", "instanceType"), "db-f1-micro"),
    ResourceSpec("google_storage_bucket", "Cloud Storage", STORAGE),
    ResourceSpec("google_compute_forwarding_rule", "Load Balancer", SIZED, ("loadBalancerType",), "standard"),
    ResourceSpec("google_compute_network", "VPC Network", FREE),
    ResourceSpec("google_compute_subnetwork", "Subnetwork", FREE),
    ResourceSpec("google_compute_route", "Route", FREE),
    ResourceSpec("google_compute_firewall", "Firewall", FREE),
)

# Short alias -> canonical type, per provider.
# Canonical names always resolve to themselves and are not repeated here.
AWS_ALIASES: Dict[str, str] = {
    "ec2": "aws_instance",
    "rds": "aws_db_instance",
    "s3": "aws_s3_bucket",
    "alb": "aws_lb",
    "nat_gateway": "aws_nat_gateway",
    "vpc_endpoint": "aws_vpc_endpoint",
    "vpc": "aws_vpc",
    "subnet": "aws_subnet",
    "internet_gateway": "aws_internet_gateway",
    "route_table": "aws_route_table",
    "security_group": "aws_security_group",
}

AZURE_ALIASES: Dict[str, str] = {
    "vpc": "azurerm_virtual_network",
    "subnet": "azurerm_subnet",
    "route_table": "azurerm_route_table",
    "security_group": "azurerm_network_security_group",
}

GCP_ALIASES: Dict[str, str] = {
    "vpc": "google_compute_network",
    "subnet": "google_compute_subnetwork",
    "route_table": "google_compute_route",
    "security_group": "google_compute_firewall",
}

RESOURCE_CATALOG = MappingProxyType({
    "aws": AWS_RESOURCES,
    "azure": AZURE_RESOURCES,
    "gcp": GCP_RESOURCES,
})

RESOURCE_ALIASES = MappingProxyType({
    "aws": MappingProxyType(AWS_ALIASES),
    "azure": MappingProxyType(AZURE_ALIASES),
    "gcp": MappingProxyType(GCP_ALIASES),
})


def normalize_resource_type(provider: str, node_type: str) -> Optional[str]:
    """
    Fold a node type onto its canonical resource type for a provider.

    Args:
        provider: Cloud provider ("aws", "azure" or "gcp")
        node_type: Short alias or canonical Terraform type

    Returns:
        Canonical resource type, or None if the provider does not know the type
    """
    resources = RESOURCE_CATALOG.get(provider)
    if resources is None or not isinstance(node_type, str):
        return None

    if node_type in resources:
        return node_type

    return RESOURCE_ALIASES[provider].get(node_type)


def get_resource_spec(provider: str, node_type: str) -> Optional[ResourceSpec]:
    """Return the pricing rule for a node type, or None if it is not catalogued."""
    canonical_type = normalize_resource_type(provider, node_type)
    if canonical_type is None:
        return None
    return RESOURCE_CATALOG[provider][canonical_type]
