"""
Domain models for cost optimization suggestions.
Defines downgrade rules and the suggestions they produce.
"""
from typing import Dict, Any, FrozenSet, Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class OptimizationRule:
    """
    A declarative downgrade rule.

    Breakdown items whose resource type equals `resource_type` and whose size
    is in `oversized` are compared against `reference_size` from the
    provider's pricing table.
    """
    provider: str
    resource_type: str  # Breakdown display name, e.g. "EC2 Instance"
    canonical_type: str  # Pricing table key for the reference size
    oversized: FrozenSet[str]
    reference_size: str
    audience: str  # Workloads the cheaper size is suggested for

    def matches(self, resource_type: str, instance_type: Optional[str]) -> bool:
        """Check whether a breakdown line falls under this rule."""
        return (
            resource_type == self.resource_type
            and instance_type is not None
            and instance_type in self.oversized
        )


@dataclass(frozen=True)
class OptimizationSuggestion:
    """Represents a cheaper substitute for one breakdown line."""
    resource_name: str
    current_cost: float
    optimized_cost: float
    savings: float
    recommendation: str
    current_instance_type: Optional[str] = None
    suggested_instance_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resourceName": self.resource_name,
            "currentCost": round(self.current_cost, 2),
            "optimizedCost": round(self.optimized_cost, 2),
            "savings": round(self.savings, 2),
            "recommendation": self.recommendation,
            "currentInstanceType": self.current_instance_type,
            "suggestedInstanceType": self.suggested_instance_type,
        }
