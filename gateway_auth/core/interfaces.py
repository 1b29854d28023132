"""Abstract interfaces for gateway-auth backends.

Core configuration logic depends only on these protocols, never on
cloud-specific SDKs like boto3. To add a new provisioning backend, implement
this protocol and wire it up in a thin handler layer.
"""

from __future__ import annotations

from typing import Protocol


class Provisioner(Protocol):
    """Create the cloud resources an authorizer is made of.

    Argument mappings use the API Gateway v2 / Lambda request shapes.
    Implementations are expected to be idempotent on replace and let
    provider errors propagate unchanged.
    """

    def create_function(self, name: str, definition: dict, description: str) -> dict:
        """Create the backing function for a REQUEST authorizer.

        Returns a handle with ``name``, ``arn`` and ``invoke_arn``.
        """
        ...

    def create_authorizer(self, name: str, args: dict) -> dict:
        """Register an authorizer on a gateway.

        Returns a handle with ``id`` and ``name``.
        """
        ...

    def create_permission(self, name: str, args: dict) -> dict:
        """Grant a service principal permission to invoke a function.

        Returns a handle with ``statement_id``, ``source_arn`` and the
        resulting policy ``statement``.
        """
        ...
