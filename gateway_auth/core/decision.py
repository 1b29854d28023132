"""Request-time adapter for REQUEST authorizers.

Turns a handler's authorization decision into the IAM policy response API
Gateway expects from a Lambda authorizer.
"""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass
from functools import wraps

logger = logging.getLogger(__name__)

POLICY_VERSION = "2012-10-17"
INVOKE_ACTION = "execute-api:Invoke"


@dataclass(frozen=True)
class AuthResult:
    """Decision returned by a user authorizer function."""

    authorized: bool
    principal_id: str | None = None
    context: dict | None = None
    policy_document: dict | None = None
    usage_identifier_key: str | None = None

    @classmethod
    def from_value(cls, value) -> AuthResult:
        """Accept an AuthResult or a protocol-shaped mapping."""
        if isinstance(value, cls):
            return value
        return cls(
            authorized=value["authorized"],
            principal_id=value.get("principalId"),
            context=value.get("context"),
            policy_document=value.get("policyDocument"),
            usage_identifier_key=value.get("usageIdentifierKey"),
        )


def default_principal_id() -> str:
    """Epoch milliseconds; used when the decision carries no principal."""
    return str(int(time.time() * 1000))


def build_response(event: dict, result: AuthResult) -> dict:
    """Render the authorizer protocol response for ``event``.

    The synthesized statement for ``event["methodArn"]`` always comes first;
    statements from the caller's policy document follow in their own order.
    """
    statement = {
        "Action": INVOKE_ACTION,
        "Effect": "Allow" if result.authorized else "Deny",
        "Resource": event["methodArn"],
    }
    caller_policy = result.policy_document or {}

    response = {
        "principalId": result.principal_id or default_principal_id(),
        "policyDocument": {
            **caller_policy,
            "Version": POLICY_VERSION,
            "Statement": [statement, *(caller_policy.get("Statement") or [])],
        },
    }
    if result.context is not None:
        response["context"] = result.context
    if result.usage_identifier_key is not None:
        response["usageIdentifierKey"] = result.usage_identifier_key

    logger.debug("%s %s for %s", statement["Effect"], event["methodArn"], response["principalId"])
    return response


def authorizer(decide):
    """Wrap a decision function as an authorizer protocol handler.

    ``decide(event, context)`` may be a coroutine function or a plain
    function, and returns an AuthResult or an equivalent mapping. Anything
    it raises propagates to the caller untouched.

        @authorizer
        async def handler(event, context):
            return {"authorized": event["headers"].get("x-key") == "secret"}
    """

    @wraps(decide)
    async def handler(event: dict, context) -> dict:
        result = decide(event, context)
        if inspect.isawaitable(result):
            result = await result
        return build_response(event, AuthResult.from_value(result))

    return handler
