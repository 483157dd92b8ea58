"""
Cost estimator service.
Converts an infrastructure diagram into a priced cost breakdown.
"""
from typing import Any, Dict, List, Mapping, Optional, Union
from datetime import datetime, timezone
import logging

from backend.domain.cost_models import CostBreakdownItem, CostEstimation, UnpricedResource
from backend.domain.diagram_models import (
    DiagramData,
    DiagramValidationError,
    InfrastructureNode,
    NodeDataError,
)
from backend.services.node_cost_resolver import NodeCostResolver
from backend.core.config import config, SUPPORTED_PROVIDERS


logger = logging.getLogger(__name__)


class CostEstimatorError(Exception):
    """Raised when cost estimation fails."""
    pass


class UnsupportedProviderError(CostEstimatorError):
    """Raised when the requested cloud provider has no pricing tables."""
    pass


class CostEstimator:
    """Service for estimating costs of an infrastructure diagram."""

    def __init__(self, resolver: NodeCostResolver = None):
        """
        Initialize cost estimator.

        Args:
            resolver: Node cost resolver (creates new if None)
        """
        self.resolver = resolver or NodeCostResolver()

    def _resolve_provider(self, provider: Optional[str]) -> str:
        if provider is None:
            return config.DEFAULT_CLOUD_PROVIDER
        if not isinstance(provider, str) or provider.lower() not in SUPPORTED_PROVIDERS:
            raise UnsupportedProviderError(
                f"Cloud provider '{provider}' not supported for pricing "
                f"(expected one of: {', '.join(SUPPORTED_PROVIDERS)})"
            )
        return provider.lower()

    def _describe_raw_node(self, raw_node: Any) -> Dict[str, str]:
        """Best-effort name and type of a node that could not be parsed."""
        if isinstance(raw_node, InfrastructureNode):
            return {"name": raw_node.name, "type": raw_node.type}
        if isinstance(raw_node, Mapping):
            data = raw_node.get("data")
            name = data.get("name") if isinstance(data, Mapping) else None
            return {
                "name": str(name or raw_node.get("id") or "unknown"),
                "type": str(raw_node.get("type") or "unknown"),
            }
        return {"name": "unknown", "type": "unknown"}

    def estimate(
        self,
        diagram_data: Union[DiagramData, Mapping[str, Any]],
        provider: Optional[str] = None
    ) -> CostEstimation:
        """
        Estimate monthly and hourly costs for a diagram.

        Nodes are priced one at a time; a node that cannot be priced (unknown
        type, unknown size or malformed data) is left out of the breakdown and
        listed in unpriced_resources instead of failing the estimate.

        Args:
            diagram_data: DiagramData or raw diagram mapping with 'nodes'
            provider: Cloud provider ("aws", "azure" or "gcp"); defaults to config

        Returns:
            CostEstimation with breakdown and totals

        Raises:
            CostEstimatorError: If the diagram structure is invalid
            UnsupportedProviderError: If the provider is not supported
        """
        resolved_provider = self._resolve_provider(provider)

        try:
            diagram = DiagramData.from_dict(diagram_data)
        except DiagramValidationError as error:
            raise CostEstimatorError(f"Invalid diagram: {error}") from error

        breakdown: List[CostBreakdownItem] = []
        unpriced_resources: List[UnpricedResource] = []
        total_monthly_cost = 0.0
        total_hourly_cost = 0.0

        for raw_node in diagram.nodes:
            try:
                node = raw_node if isinstance(raw_node, InfrastructureNode) else InfrastructureNode.from_dict(raw_node)
                line_item = self.resolver.resolve(node, resolved_provider)
            except NodeDataError as error:
                described = self._describe_raw_node(raw_node)
                logger.warning(
                    f"Skipping node {described['name']} ({described['type']}): malformed data: {error}",
                    exc_info=True
                )
                unpriced_resources.append(UnpricedResource(
                    resource_name=described["name"],
                    resource_type=described["type"],
                    reason=f"Malformed node data: {error}"
                ))
                continue
            except Exception as error:
                described = self._describe_raw_node(raw_node)
                logger.error(
                    f"Unexpected error pricing node {described['name']} ({described['type']}): "
                    f"{type(error).__name__}: {error}",
                    exc_info=True
                )
                unpriced_resources.append(UnpricedResource(
                    resource_name=described["name"],
                    resource_type=described["type"],
                    reason="Unexpected error during pricing lookup"
                ))
                continue

            if line_item is None:
                reason = self.resolver.unpriced_reason(node, resolved_provider)
                logger.warning(f"No pricing available for {node.name} ({node.type}): {reason}")
                unpriced_resources.append(UnpricedResource(
                    resource_name=node.name,
                    resource_type=node.type,
                    reason=reason
                ))
                continue

            breakdown.append(line_item)
            total_monthly_cost += line_item.total_cost
            total_hourly_cost += line_item.hourly_cost

        logger.info(
            "Estimated %d/%d nodes for %s: $%.2f/month",
            len(breakdown),
            len(diagram.nodes),
            resolved_provider,
            total_monthly_cost,
        )

        return CostEstimation(
            total_monthly_cost=total_monthly_cost,
            total_hourly_cost=total_hourly_cost,
            breakdown=breakdown,
            currency=config.CURRENCY,
            last_updated=datetime.now(timezone.utc),
            provider=resolved_provider,
            unpriced_resources=unpriced_resources,
        )

    def compare_providers(
        self,
        diagram_data: Union[DiagramData, Mapping[str, Any]]
    ) -> Dict[str, CostEstimation]:
        """
        Estimate the same diagram against every supported provider.

        Node types a provider does not recognize are reported as unpriced for
        that provider, so the totals are only comparable for nodes priced by all.

        Args:
            diagram_data: DiagramData or raw diagram mapping

        Returns:
            Mapping of provider to CostEstimation

        Raises:
            CostEstimatorError: If the diagram structure is invalid
        """
        try:
            diagram = DiagramData.from_dict(diagram_data)
        except DiagramValidationError as error:
            raise CostEstimatorError(f"Invalid diagram: {error}") from error

        return {
            provider: self.estimate(diagram, provider)
            for provider in SUPPORTED_PROVIDERS
        }


_default_estimator = CostEstimator()


def estimate_costs(
    diagram_data: Union[DiagramData, Mapping[str, Any]],
    provider: Optional[str] = "aws"
) -> CostEstimation:
    """Estimate a diagram with the shared estimator instance."""
    return _default_estimator.estimate(diagram_data, provider)
