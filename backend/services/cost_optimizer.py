"""
Cost optimization service.
Suggests cheaper equivalents for oversized resources in a cost breakdown.
"""
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union
import logging

from backend.domain.cost_models import CostBreakdownItem
from backend.domain.optimization_models import OptimizationRule, OptimizationSuggestion
from backend.pricing.pricing_tables import get_price_entry


logger = logging.getLogger(__name__)


class OptimizationInputError(ValueError):
    """Raised when a breakdown item cannot be read."""
    pass


# Resource type display names are unique per provider, so one rule at most
# matches a given breakdown line.
OPTIMIZATION_RULES: Tuple[OptimizationRule, ...] = (
    OptimizationRule(
        provider="aws",
        resource_type="EC2 Instance",
        canonical_type="aws_instance",
        oversized=frozenset({"t3.large", "t3.xlarge", "m5.large", "m5.xlarge"}),
        reference_size="t3.small",
        audience="non-production workloads",
    ),
    OptimizationRule(
        provider="aws",
        resource_type="RDS Instance",
        canonical_type="aws_db_instance",
        oversized=frozenset({"db.m5.large", "db.m5.xlarge"}),
        reference_size="db.t3.small",
        audience="development/testing",
    ),
    OptimizationRule(
        provider="azure",
        resource_type="Linux VM",
        canonical_type="azurerm_linux_virtual_machine",
        oversized=frozenset({"Standard_D2s_v3"}),
        reference_size="Standard_B2s",
        audience="non-production workloads",
    ),
    OptimizationRule(
        provider="azure",
        resource_type="PostgreSQL Server",
        canonical_type="azurerm_postgresql_server",
        oversized=frozenset({"GP_Gen5_2"}),
        reference_size="B_Gen5_1",
        audience="development/testing",
    ),
    OptimizationRule(
        provider="gcp",
        resource_type="Compute Engine",
        canonical_type="google_compute_instance",
        oversized=frozenset({"n1-standard-1"}),
        reference_size="e2-small",
        audience="non-production workloads",
    ),
    OptimizationRule(
        provider="gcp",
        resource_type="Cloud SQL",
        canonical_type="google_sql_database_instance",
        oversized=frozenset({"db-g1-small"}),
        reference_size="db-f1-micro",
        audience="development/testing",
    ),
)


class CostOptimizer:
    """Applies downgrade rules to an already computed breakdown."""

    def __init__(self, rules: Iterable[OptimizationRule] = OPTIMIZATION_RULES):
        self.rules = tuple(rules)

    def _find_rule(self, item: CostBreakdownItem) -> Optional[OptimizationRule]:
        for rule in self.rules:
            if rule.matches(item.resource_type, item.instance_type):
                return rule
        return None

    def _suggest(
        self,
        item: CostBreakdownItem,
        rule: OptimizationRule
    ) -> Optional[OptimizationSuggestion]:
        entry = get_price_entry(rule.provider, rule.canonical_type, rule.reference_size)
        if entry is None or entry.monthly is None:
            logger.warning(
                f"Optimization rule for {rule.resource_type} references unpriced size {rule.reference_size}"
            )
            return None

        optimized_cost = entry.monthly * item.quantity
        savings = item.total_cost - optimized_cost
        if not savings > 0:
            return None

        return OptimizationSuggestion(
            resource_name=item.resource_name,
            current_cost=item.total_cost,
            optimized_cost=optimized_cost,
            savings=savings,
            recommendation=(
                f"Consider using {rule.reference_size} instead of {item.instance_type} "
                f"for {rule.audience}"
            ),
            current_instance_type=item.instance_type,
            suggested_instance_type=rule.reference_size,
        )

    def optimize(
        self,
        breakdown: Iterable[Union[CostBreakdownItem, Mapping[str, Any]]]
    ) -> List[OptimizationSuggestion]:
        """
        Propose cheaper sizes for oversized breakdown lines.

        Args:
            breakdown: Breakdown items, as objects or in their JSON form

        Returns:
            Suggestions with strictly positive savings, in breakdown order

        Raises:
            OptimizationInputError: If a breakdown item cannot be read
        """
        suggestions: List[OptimizationSuggestion] = []

        for raw_item in breakdown:
            if isinstance(raw_item, CostBreakdownItem):
                item = raw_item
            else:
                try:
                    item = CostBreakdownItem.from_dict(raw_item)
                except ValueError as error:
                    raise OptimizationInputError(str(error)) from error

            rule = self._find_rule(item)
            if rule is None:
                continue

            suggestion = self._suggest(item, rule)
            if suggestion is not None:
                suggestions.append(suggestion)

        return suggestions


def summarize_savings(suggestions: Iterable[OptimizationSuggestion]) -> float:
    """Total monthly savings across suggestions."""
    return sum(suggestion.savings for suggestion in suggestions)


_default_optimizer = CostOptimizer()


def optimize_costs(
    breakdown: Iterable[Union[CostBreakdownItem, Mapping[str, Any]]]
) -> List[OptimizationSuggestion]:
    """Run the default rule set over a breakdown."""
    return _default_optimizer.optimize(breakdown)
