"""Shared fixtures for unit tests — uses the mock provisioner, no AWS needed."""

import pytest
import sys
import os

# Add project root to path so gateway_auth is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from gateway_auth.backends.mock.provisioner import MockProvisioner
from gateway_auth.core.configurator import OwnerApi


SAMPLE_API = OwnerApi(
    id="a1b2c3",
    name="orders-api",
    execution_arn="arn:aws:execute-api:us-east-1:123456789012:a1b2c3",
)

SAMPLE_METHOD_ARN = "arn:aws:execute-api:us-east-1:123456789012:a1b2c3/prod/GET/items"


@pytest.fixture
def provisioner():
    return MockProvisioner()


@pytest.fixture
def api():
    return SAMPLE_API


@pytest.fixture
def event():
    return {
        "type": "REQUEST",
        "methodArn": SAMPLE_METHOD_ARN,
        "headers": {"authorization": "Bearer token"},
        "multiValueHeaders": {"authorization": ["Bearer token"]},
        "requestContext": {"requestId": "req-1"},
    }
