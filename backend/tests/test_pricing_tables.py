"""
Tests for static pricing tables and the resource catalog.
"""

import pytest
from backend.pricing.pricing_tables import (
    AWS_PRICING,
    PriceEntry,
    get_price_entry,
    get_pricing_table,
)
from backend.pricing.resource_catalog import (
    FREE,
    RESOURCE_ALIASES,
    RESOURCE_CATALOG,
    get_resource_spec,
    normalize_resource_type,
)


def test_known_size_returns_price_entry():
    """Known (provider, type, size) combinations are priced."""
    entry = get_price_entry('aws', 'aws_instance', 't3.micro')

    assert entry == PriceEntry(hourly=0.0104, monthly=7.49)


@pytest.mark.parametrize('provider, resource_type, size', [
    ('aws', 'aws_instance', 'x9.enormous'),
    ('aws', 'aws_widget', 't3.micro'),
    ('azure', 'aws_instance', 't3.micro'),
    ('oracle', 'aws_instance', 't3.micro'),
])
def test_unknown_combination_returns_none(provider, resource_type, size):
    """Unknown combinations mean 'no pricing available', never zero."""
    assert get_price_entry(provider, resource_type, size) is None


def test_storage_entries_use_per_gb_rate():
    """Storage is priced per GB-month, without hourly/monthly pairs."""
    entry = get_price_entry('gcp', 'google_storage_bucket', 'nearline')

    assert entry.per_gb_monthly == 0.01
    assert entry.monthly is None
    assert entry.to_dict() == {'per_gb_monthly': 0.01}


def test_pricing_tables_are_read_only():
    """Pricing tables cannot be mutated at runtime."""
    with pytest.raises(TypeError):
        AWS_PRICING['aws_instance'] = {}

    with pytest.raises(TypeError):
        AWS_PRICING['aws_instance']['t3.micro'] = PriceEntry(monthly=0.0)

    with pytest.raises(AttributeError):
        AWS_PRICING['aws_instance']['t3.micro'].monthly = 0.0


def test_get_pricing_table_unknown_provider():
    """Unsupported providers have no table."""
    assert get_pricing_table('oracle') is None
    assert 'azurerm_lb' in get_pricing_table('azure')


def test_short_alias_and_canonical_name_normalize_to_same_key():
    """'ec2' and 'aws_instance' share one pricing path."""
    assert normalize_resource_type('aws', 'ec2') == 'aws_instance'
    assert normalize_resource_type('aws', 'aws_instance') == 'aws_instance'
    assert get_resource_spec('aws', 'ec2') is get_resource_spec('aws', 'aws_instance')


def test_aliases_are_provider_scoped():
    """AWS short names are not recognized for other providers."""
    assert normalize_resource_type('azure', 'ec2') is None
    assert normalize_resource_type('gcp', 'aws_instance') is None


def test_generic_network_aliases_map_to_each_providers_primitive():
    """Generic structural aliases resolve per provider."""
    assert normalize_resource_type('aws', 'vpc') == 'aws_vpc'
    assert normalize_resource_type('azure', 'vpc') == 'azurerm_virtual_network'
    assert normalize_resource_type('gcp', 'vpc') == 'google_compute_network'


def test_unknown_type_or_provider_normalizes_to_none():
    """Unknown types and providers are not catalogued."""
    assert normalize_resource_type('aws', 'unknown_widget') is None
    assert normalize_resource_type('oracle', 'vpc') is None
    assert normalize_resource_type('aws', None) is None


def test_every_alias_points_at_a_catalogued_type():
    """Alias targets exist in the provider's catalog."""
    for provider, aliases in RESOURCE_ALIASES.items():
        for alias, canonical_type in aliases.items():
            assert canonical_type in RESOURCE_CATALOG[provider], (provider, alias)


def test_every_priced_spec_default_size_has_a_price():
    """Default sizes of sized resources are priced."""
    for provider, resources in RESOURCE_CATALOG.items():
        for spec in resources.values():
            if spec.kind == FREE or spec.default_size is None:
                continue
            assert get_price_entry(provider, spec.canonical_type, spec.default_size) is not None, spec
