"""AWS Lambda handler entry points.

These are thin wrappers that parse Lambda events, build backend dependencies,
call cloud-agnostic core logic, and format responses. All business logic
lives in gateway_auth/core/.
"""

from __future__ import annotations

import asyncio
import logging
from functools import wraps

logger = logging.getLogger(__name__)


# ---- Shared helpers ----


def _get_provisioner():
    """Build an ApiGatewayProvisioner from environment variables."""
    from gateway_auth.shared.config import AUTHORIZER_ROLE_ARN, AWS_REGION
    from gateway_auth.backends.aws.provisioner import ApiGatewayProvisioner

    return ApiGatewayProvisioner(
        region_name=AWS_REGION(),
        default_role_arn=AUTHORIZER_ROLE_ARN(),
    )


# ---- Request time ----


def lambda_entrypoint(handler):
    """Expose an async authorizer handler to the synchronous Lambda runtime.

        handler = lambda_entrypoint(authorizer(decide))
    """

    @wraps(handler)
    def entrypoint(event, context):
        return asyncio.run(handler(event, context))

    return entrypoint


# ---- Deployment time ----


def configure_handler(event, context):
    """Register an authorizer on an existing API.

    Event: {"api_id": "a1b2c3", "authorizer": {"name": "Auth", "jwt": {...}}}
    """
    from gateway_auth.core.configurator import AuthorizerSpec, configure

    provisioner = _get_provisioner()
    spec = AuthorizerSpec.from_dict(event["authorizer"])

    api = provisioner.lookup_api(event["api_id"])
    descriptor = configure(spec, api, provisioner)
    logger.info("Configured %s authorizer %s", descriptor.type, descriptor.id)

    result = {"id": descriptor.id, "type": descriptor.type}
    if descriptor.type == "REQUEST":
        result["function_arn"] = descriptor.backing_function["arn"]
    return result
