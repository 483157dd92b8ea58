"""
Domain models for cost estimation.
Defines the structure of cost estimates and breakdown items.
"""
from typing import List, Dict, Any, Mapping, Optional
import math
from dataclasses import dataclass, field
from datetime import datetime

from backend.core.config import config


PERIOD_MONTHLY = "monthly"
PERIOD_HOURLY = "hourly"
ALLOWED_PERIODS = {PERIOD_MONTHLY, PERIOD_HOURLY}

# What "quantity" counts on a breakdown item
UNIT_INSTANCE = "instance"
UNIT_GB_MONTH = "GB-month"
UNIT_RESOURCE = "resource"


def _read_amount(raw: Mapping[str, Any], key: str, default: Any) -> float:
    """Read a finite, non-negative number from a breakdown item."""
    value = raw.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"Breakdown item has invalid {key}: {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError) as error:
        raise ValueError(f"Breakdown item has invalid {key}: {value!r}") from error
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"Breakdown item has invalid {key}: {value!r}")
    return amount


@dataclass(frozen=True)
class CostBreakdownItem:
    """Represents a single priced line for one diagram node."""
    resource_type: str  # Display name, e.g. "EC2 Instance"
    resource_name: str
    instance_type: Optional[str]  # Size/class, or "{GB}GB {class}" for storage
    quantity: float  # Item count, or GB for storage (see pricing_unit)
    unit_cost: float
    total_cost: float
    period: str = PERIOD_MONTHLY
    pricing_unit: str = UNIT_INSTANCE

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CostBreakdownItem":
        """
        Build a breakdown item from its JSON form.

        Raises:
            ValueError: If required fields are missing or have the wrong type
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"Breakdown item must be an object, got {type(raw).__name__}")

        for key in ("resourceType", "totalCost"):
            if key not in raw:
                raise ValueError(f"Breakdown item is missing {key!r}")

        resource_type = raw["resourceType"]
        total_cost = _read_amount(raw, "totalCost", None)

        if not isinstance(resource_type, str):
            raise ValueError("Breakdown item 'resourceType' must be a string")

        instance_type = raw.get("instanceType")
        if instance_type is not None and not isinstance(instance_type, str):
            raise ValueError("Breakdown item 'instanceType' must be a string")

        period = raw.get("period", PERIOD_MONTHLY)
        if period not in ALLOWED_PERIODS:
            raise ValueError(f"Breakdown item has unknown period: {period!r}")

        quantity = _read_amount(raw, "quantity", 1)
        unit_cost = _read_amount(raw, "unitCost", total_cost)

        return cls(
            resource_type=resource_type,
            resource_name=str(raw.get("resourceName", "unknown")),
            instance_type=instance_type,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=total_cost,
            period=period,
            pricing_unit=raw.get("pricingUnit", UNIT_INSTANCE),
        )

    @property
    def hourly_cost(self) -> float:
        """Cost of this item per hour, using the average-month approximation."""
        if self.period == PERIOD_MONTHLY:
            return self.total_cost / config.HOURS_PER_MONTH
        return self.total_cost

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "resourceType": self.resource_type,
            "resourceName": self.resource_name,
            "quantity": self.quantity,
            "unitCost": self.unit_cost,
            "totalCost": round(self.total_cost, 2),
            "period": self.period,
            "pricingUnit": self.pricing_unit,
        }
        if self.instance_type is not None:
            result["instanceType"] = self.instance_type
        return result


@dataclass(frozen=True)
class UnpricedResource:
    """Represents a node that was left out of the breakdown."""
    resource_name: str
    resource_type: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "resourceName": self.resource_name,
            "resourceType": self.resource_type,
            "reason": self.reason,
        }


@dataclass
class CostEstimation:
    """Represents a complete cost estimate for a diagram."""
    total_monthly_cost: float
    total_hourly_cost: float
    breakdown: List[CostBreakdownItem]
    currency: str
    last_updated: datetime
    provider: str
    unpriced_resources: List[UnpricedResource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        The monthly total is summed from the rounded item totals.
        """
        breakdown = [item.to_dict() for item in self.breakdown]
        return {
            "totalMonthlyCost": round(sum(item["totalCost"] for item in breakdown), 2),
            "totalHourlyCost": round(self.total_hourly_cost, 4),
            "currency": self.currency,
            "provider": self.provider,
            "lastUpdated": self.last_updated.isoformat(),
            "breakdown": breakdown,
            "unpricedResources": [resource.to_dict() for resource in self.unpriced_resources],
        }
