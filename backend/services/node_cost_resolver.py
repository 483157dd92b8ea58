"""
Node cost resolver.
Prices a single diagram node against the static pricing tables.
"""
from typing import Any, Mapping, Optional, Union
import logging

from backend.domain.cost_models import (
    CostBreakdownItem,
    PERIOD_MONTHLY,
    UNIT_GB_MONTH,
    UNIT_INSTANCE,
    UNIT_RESOURCE,
)
from backend.domain.diagram_models import InfrastructureNode, NodeDataError
from backend.pricing.pricing_tables import get_price_entry
from backend.pricing.resource_catalog import FREE, STORAGE, ResourceSpec, get_resource_spec
from backend.core.config import config


logger = logging.getLogger(__name__)

Number = Union[int, float]


def _read_number(data: Mapping[str, Any], field_name: str, default: Number) -> Number:
    """
    Read a positive number from node data.

    Missing, empty or zero values fall back to the default, matching how the
    diagram editor leaves untouched fields. Numeric strings are accepted.

    Raises:
        NodeDataError: If the value is not a number or is negative
    """
    raw = data.get(field_name)
    if isinstance(raw, bool):
        raise NodeDataError(f"'{field_name}' must be a number, got a boolean")
    if raw is None or raw == "" or raw == 0:
        return default

    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError as error:
            raise NodeDataError(f"'{field_name}' must be a number, got {raw!r}") from error
    elif isinstance(raw, (int, float)):
        value = raw
    else:
        raise NodeDataError(f"'{field_name}' must be a number, got {type(raw).__name__}")

    if value != value or value in (float("inf"), float("-inf")):
        raise NodeDataError(f"'{field_name}' must be finite")
    if value < 0:
        raise NodeDataError(f"'{field_name}' must not be negative, got {raw!r}")
    if value == 0:
        return default

    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _read_text(data: Mapping[str, Any], field_name: str) -> Optional[str]:
    raw = data.get(field_name)
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise NodeDataError(f"'{field_name}' must be a string, got {type(raw).__name__}")
    return raw.strip()


class NodeCostResolver:
    """Maps one infrastructure node to a priced breakdown line."""

    def resolve(self, node: InfrastructureNode, provider: str) -> Optional[CostBreakdownItem]:
        """
        Price a node for a provider.

        Args:
            node: Diagram node
            provider: Cloud provider ("aws", "azure" or "gcp")

        Returns:
            CostBreakdownItem, or None when the type or size has no pricing

        Raises:
            NodeDataError: If the node data is malformed
        """
        spec = get_resource_spec(provider, node.type)
        if spec is None:
            return None

        if spec.kind == FREE:
            return self._price_free(node, spec)
        if spec.kind == STORAGE:
            return self._price_storage(node, spec, provider)
        return self._price_sized(node, spec, provider)

    def unpriced_reason(self, node: InfrastructureNode, provider: str) -> str:
        """Describe why resolve() returned None for a node."""
        spec = get_resource_spec(provider, node.type)
        if spec is None:
            return f"Unknown resource type '{node.type}' for {provider}"
        if spec.kind == STORAGE:
            return f"No pricing for storage class '{self._storage_class(node)}'"
        return f"No pricing for size '{self._size(node, spec)}'"

    def _size(self, node: InfrastructureNode, spec: ResourceSpec) -> Optional[str]:
        for field_name in spec.size_fields:
            value = _read_text(node.data, field_name)
            if value:
                return value
        return spec.default_size

    def _storage_class(self, node: InfrastructureNode) -> str:
        storage_class = _read_text(node.data, "storageClass") or config.DEFAULT_STORAGE_CLASS
        # The palette emits upper-case classes ("STANDARD"); tables use lower-case keys
        return storage_class.lower()

    def _price_sized(
        self,
        node: InfrastructureNode,
        spec: ResourceSpec,
        provider: str
    ) -> Optional[CostBreakdownItem]:
        size = self._size(node, spec)
        quantity = _read_number(node.data, "quantity", 1)

        entry = get_price_entry(provider, spec.canonical_type, size)
        if entry is None or entry.monthly is None:
            logger.debug(f"No price for {spec.canonical_type} size={size} on {provider}")
            return None

        return CostBreakdownItem(
            resource_type=spec.display_name,
            resource_name=node.name,
            instance_type=size if spec.label_size else None,
            quantity=quantity,
            unit_cost=entry.monthly,
            total_cost=entry.monthly * quantity,
            period=PERIOD_MONTHLY,
            pricing_unit=UNIT_INSTANCE,
        )

    def _price_storage(
        self,
        node: InfrastructureNode,
        spec: ResourceSpec,
        provider: str
    ) -> Optional[CostBreakdownItem]:
        storage_gb = _read_number(node.data, "storageGB", config.DEFAULT_STORAGE_GB)
        storage_class = self._storage_class(node)

        entry = get_price_entry(provider, spec.canonical_type, storage_class)
        if entry is None or entry.per_gb_monthly is None:
            logger.debug(f"No price for {spec.canonical_type} class={storage_class} on {provider}")
            return None

        return CostBreakdownItem(
            resource_type=spec.display_name,
            resource_name=node.name,
            instance_type=f"{storage_gb}GB {storage_class}",
            quantity=storage_gb,
            unit_cost=entry.per_gb_monthly,
            total_cost=entry.per_gb_monthly * storage_gb,
            period=PERIOD_MONTHLY,
            pricing_unit=UNIT_GB_MONTH,
        )

    def _price_free(self, node: InfrastructureNode, spec: ResourceSpec) -> CostBreakdownItem:
        return CostBreakdownItem(
            resource_type=spec.display_name,
            resource_name=node.name,
            instance_type=None,
            quantity=1,
            unit_cost=0.0,
            total_cost=0.0,
            period=PERIOD_MONTHLY,
            pricing_unit=UNIT_RESOURCE,
        )
