"""
Shared pytest fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from backend.main import app
from backend.middleware.rate_limiter import rate_limiter


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Start every test with an empty rate limit window."""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def sample_diagram():
    """Small AWS web stack as saved by the diagram editor."""
    return {
        'nodes': [
            {
                'id': 'node-1',
                'type': 'ec2',
                'position': {'x': 100, 'y': 100},
                'data': {'label': 'EC2', 'name': 'web', 'instanceType': 't3.micro', 'quantity': 2}
            },
            {
                'id': 'node-2',
                'type': 'rds',
                'position': {'x': 300, 'y': 100},
                'data': {'label': 'RDS', 'name': 'db', 'instanceClass': 'db.t3.small'}
            },
            {
                'id': 'node-3',
                'type': 's3',
                'position': {'x': 500, 'y': 100},
                'data': {'label': 'S3', 'name': 'assets', 'storageGB': 200, 'storageClass': 'standard'}
            },
            {
                'id': 'node-4',
                'type': 'vpc',
                'position': {'x': 0, 'y': 0},
                'data': {'label': 'VPC', 'cidrBlock': '10.0.0.0/16'}
            },
        ],
        'edges': [
            {'id': 'edge-1', 'source': 'node-1', 'target': 'node-2'},
        ]
    }


@pytest.fixture
def oversized_breakdown():
    """Breakdown with one oversized EC2 instance and one small one."""
    return [
        {
            'resourceType': 'EC2 Instance',
            'resourceName': 'api',
            'instanceType': 'm5.xlarge',
            'quantity': 1,
            'unitCost': 138.24,
            'totalCost': 138.24,
            'period': 'monthly'
        },
        {
            'resourceType': 'EC2 Instance',
            'resourceName': 'worker',
            'instanceType': 't3.micro',
            'quantity': 1,
            'unitCost': 7.49,
            'totalCost': 7.49,
            'period': 'monthly'
        },
    ]
