"""
Tests for cost optimization suggestions.
"""

import pytest
from backend.domain.cost_models import CostBreakdownItem
from backend.domain.optimization_models import OptimizationRule
from backend.services.cost_estimator import estimate_costs
from backend.services.cost_optimizer import (
    OPTIMIZATION_RULES,
    CostOptimizer,
    OptimizationInputError,
    optimize_costs,
    summarize_savings,
)


def test_oversized_ec2_downgraded_to_t3_small(oversized_breakdown):
    """m5.xlarge is suggested down to t3.small; t3.micro is left alone."""
    suggestions = optimize_costs(oversized_breakdown)

    assert len(suggestions) == 1
    suggestion = suggestions[0]
    assert suggestion.resource_name == 'api'
    assert suggestion.current_cost == 138.24
    assert suggestion.optimized_cost == 14.98
    assert suggestion.savings == pytest.approx(123.26)
    assert suggestion.savings == pytest.approx(suggestion.current_cost - suggestion.optimized_cost)
    assert suggestion.suggested_instance_type == 't3.small'
    assert suggestion.recommendation == (
        'Consider using t3.small instead of m5.xlarge for non-production workloads'
    )


def test_small_instances_get_no_suggestions():
    """Breakdowns of already small instances produce no suggestions."""
    breakdown = [
        CostBreakdownItem('EC2 Instance', 'web', 't3.micro', 1, 7.49, 7.49),
        CostBreakdownItem('RDS Instance', 'db', 'db.t3.micro', 1, 12.41, 12.41),
    ]

    assert optimize_costs(breakdown) == []


def test_empty_breakdown():
    """Empty breakdowns produce no suggestions."""
    assert optimize_costs([]) == []


def test_oversized_rds_downgraded_to_db_t3_small():
    """db.m5.large is suggested down to db.t3.small."""
    breakdown = [CostBreakdownItem('RDS Instance', 'orders', 'db.m5.large', 2, 129.60, 259.20)]

    suggestions = optimize_costs(breakdown)

    assert len(suggestions) == 1
    assert suggestions[0].optimized_cost == pytest.approx(49.64)
    assert suggestions[0].savings == pytest.approx(209.56)
    assert 'development/testing' in suggestions[0].recommendation


def test_savings_scale_with_quantity():
    """Reference price is multiplied by the item quantity."""
    breakdown = [CostBreakdownItem('EC2 Instance', 'fleet', 't3.large', 3, 59.90, 179.70)]

    suggestion = optimize_costs(breakdown)[0]

    assert suggestion.optimized_cost == pytest.approx(44.94)
    assert suggestion.savings == pytest.approx(134.76)


def test_non_positive_savings_suppressed():
    """Suggestions are only emitted when they actually save money."""
    # A discounted line already cheaper than the reference size
    breakdown = [CostBreakdownItem('EC2 Instance', 'reserved', 'm5.large', 1, 10.0, 10.0)]

    assert optimize_costs(breakdown) == []


def test_resource_type_partition_respected():
    """Sizes only match rules for their own resource type."""
    breakdown = [CostBreakdownItem('Load Balancer', 'lb', 'm5.large', 1, 16.20, 16.20)]

    assert optimize_costs(breakdown) == []


def test_azure_and_gcp_rules():
    """Rules cover oversized Azure and GCP sizes."""
    azure = estimate_costs({'nodes': [
        {'id': 'vm', 'type': 'azurerm_linux_virtual_machine', 'data': {'instanceType': 'Standard_D2s_v3'}},
        {'id': 'pg', 'type': 'azurerm_postgresql_server', 'data': {'instanceClass': 'GP_Gen5_2'}},
    ]}, 'azure')
    gcp = estimate_costs({'nodes': [
        {'id': 'vm', 'type': 'google_compute_instance', 'data': {'instanceType': 'n1-standard-1'}},
        {'id': 'sql', 'type': 'google_sql_database_instance', 'data': {'instanceClass': 'db-g1-small'}},
    ]}, 'gcp')

    azure_suggestions = optimize_costs(azure.breakdown)
    gcp_suggestions = optimize_costs(gcp.breakdown)

    assert [s.suggested_instance_type for s in azure_suggestions] == ['Standard_B2s', 'B_Gen5_1']
    assert azure_suggestions[0].savings == pytest.approx(69.12 - 16.06)
    assert [s.suggested_instance_type for s in gcp_suggestions] == ['e2-small', 'db-f1-micro']
    assert gcp_suggestions[1].savings == pytest.approx(19.71 - 10.95)


def test_rules_are_data_driven():
    """New rules are additions to the table, not code changes."""
    rule = OptimizationRule(
        provider='aws',
        resource_type='EC2 Instance',
        canonical_type='aws_instance',
        oversized=frozenset({'c5.xlarge'}),
        reference_size='c5.large',
        audience='batch jobs',
    )
    optimizer = CostOptimizer(rules=OPTIMIZATION_RULES + (rule,))
    breakdown = [CostBreakdownItem('EC2 Instance', 'batch', 'c5.xlarge', 1, 122.40, 122.40)]

    suggestions = optimizer.optimize(breakdown)

    assert suggestions[0].optimized_cost == 61.20
    assert suggestions[0].recommendation.endswith('for batch jobs')


def test_rule_with_unpriced_reference_is_skipped():
    """A rule pointing at an unpriced size produces nothing."""
    rule = OptimizationRule(
        provider='aws',
        resource_type='EC2 Instance',
        canonical_type='aws_instance',
        oversized=frozenset({'m5.large'}),
        reference_size='t2.nano',
        audience='anything',
    )
    breakdown = [CostBreakdownItem('EC2 Instance', 'web', 'm5.large', 1, 69.12, 69.12)]

    assert CostOptimizer(rules=[rule]).optimize(breakdown) == []


@pytest.mark.parametrize('item', [
    'EC2 Instance',
    {'resourceName': 'web'},
    {'resourceType': 'EC2 Instance', 'totalCost': 'expensive'},
    {'resourceType': 'EC2 Instance', 'totalCost': 10, 'period': 'weekly'},
    {'resourceType': 'EC2 Instance', 'instanceType': 'm5.xlarge', 'totalCost': 'nan'},
    {'resourceType': 'EC2 Instance', 'instanceType': 'm5.xlarge', 'totalCost': float('nan')},
    {'resourceType': 'EC2 Instance', 'instanceType': 'm5.xlarge', 'totalCost': 'inf'},
    {'resourceType': 'EC2 Instance', 'instanceType': 'm5.xlarge', 'totalCost': 138.24, 'quantity': -1},
    {'resourceType': 'EC2 Instance', 'instanceType': 'm5.xlarge', 'totalCost': 138.24, 'unitCost': -5},
])
def test_malformed_breakdown_items_raise(item):
    """Unreadable breakdown items are rejected."""
    with pytest.raises(OptimizationInputError):
        optimize_costs([item])


def test_summarize_savings(oversized_breakdown):
    """Total savings sums every suggestion."""
    suggestions = optimize_costs(oversized_breakdown + [
        {'resourceType': 'RDS Instance', 'resourceName': 'db', 'instanceType': 'db.m5.xlarge',
         'quantity': 1, 'totalCost': 259.20},
    ])

    assert summarize_savings(suggestions) == pytest.approx(123.26 + 234.38)
    assert summarize_savings([]) == 0


def test_suggestion_serialization(oversized_breakdown):
    """Serialized suggestions round money to cents."""
    data = optimize_costs(oversized_breakdown)[0].to_dict()

    assert data == {
        'resourceName': 'api',
        'currentCost': 138.24,
        'optimizedCost': 14.98,
        'savings': 123.26,
        'recommendation': 'Consider using t3.small instead of m5.xlarge for non-production workloads',
        'currentInstanceType': 'm5.xlarge',
        'suggestedInstanceType': 't3.small',
    }


def test_emitted_savings_are_always_positive():
    """Every suggestion saves a positive, finite amount."""
    breakdown = [
        CostBreakdownItem('EC2 Instance', 'api', 'm5.xlarge', 1, float('nan'), float('nan')),
        CostBreakdownItem('EC2 Instance', 'batch', 'm5.large', 1, 69.12, 69.12),
    ]

    suggestions = optimize_costs(breakdown)

    assert [s.resource_name for s in suggestions] == ['batch']
    assert all(s.savings > 0 for s in suggestions)
