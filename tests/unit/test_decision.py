"""Unit tests for the request-time decision adapter."""

from __future__ import annotations

import asyncio

import pytest

from gateway_auth.core import decision
from gateway_auth.core.decision import AuthResult


def _invoke(decide, event, context=None):
    return asyncio.run(decision.authorizer(decide)(event, context))


def test_allow_with_principal_renders_single_allow_statement(event):
    async def decide(event, context):
        return {"authorized": True, "principalId": "u1"}

    response = _invoke(decide, event)

    assert response == {
        "principalId": "u1",
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Action": "execute-api:Invoke",
                    "Effect": "Allow",
                    "Resource": event["methodArn"],
                }
            ],
        },
    }


def test_deny_without_principal_synthesizes_one(event, monkeypatch):
    monkeypatch.setattr(decision.time, "time", lambda: 1700000000.5)

    async def decide(event, context):
        return AuthResult(authorized=False)

    response = _invoke(decide, event)

    assert response["principalId"] == "1700000000500"
    assert response["policyDocument"]["Statement"][0] == {
        "Action": "execute-api:Invoke",
        "Effect": "Deny",
        "Resource": event["methodArn"],
    }


def test_empty_principal_is_replaced(event):
    response = decision.build_response(event, AuthResult(authorized=True, principal_id=""))

    assert response["principalId"]


def test_caller_statements_follow_the_mandatory_one_in_order(event):
    extra = [
        {"Action": "execute-api:Invoke", "Effect": "Allow", "Resource": "arn:one"},
        {"Action": "execute-api:Invoke", "Effect": "Deny", "Resource": "arn:two"},
        {"Action": "execute-api:Invoke", "Effect": "Allow", "Resource": "arn:three"},
    ]
    result = AuthResult(authorized=False, principal_id="u1", policy_document={"Statement": extra})

    statements = decision.build_response(event, result)["policyDocument"]["Statement"]

    assert len(statements) == 4
    assert statements[0]["Effect"] == "Deny"
    assert statements[0]["Resource"] == event["methodArn"]
    assert statements[1:] == extra


def test_caller_version_is_overridden_and_other_keys_kept(event):
    result = AuthResult(
        authorized=True,
        principal_id="u1",
        policy_document={"Version": "2008-10-17", "Id": "policy-1"},
    )

    document = decision.build_response(event, result)["policyDocument"]

    assert document["Version"] == "2012-10-17"
    assert document["Id"] == "policy-1"
    assert len(document["Statement"]) == 1


def test_context_and_usage_key_pass_through_verbatim(event):
    context = {"userId": "u1", "admin": False, "quota": 3}

    response = decision.build_response(
        event,
        AuthResult(
            authorized=True,
            principal_id="u1",
            context=context,
            usage_identifier_key="key-123",
        ),
    )

    assert response["context"] is context
    assert response["usageIdentifierKey"] == "key-123"


def test_absent_context_and_usage_key_are_omitted(event):
    response = decision.build_response(event, AuthResult(authorized=True, principal_id="u1"))

    assert "context" not in response
    assert "usageIdentifierKey" not in response


def test_sync_decision_functions_are_accepted(event):
    response = _invoke(lambda event, context: {"authorized": True, "principalId": "u2"}, event)

    assert response["principalId"] == "u2"
    assert response["policyDocument"]["Statement"][0]["Effect"] == "Allow"


def test_handler_receives_event_and_context(event):
    seen = {}

    async def decide(event, context):
        seen["event"] = event
        seen["context"] = context
        return {"authorized": True}

    lambda_context = object()
    _invoke(decide, event, lambda_context)

    assert seen == {"event": event, "context": lambda_context}


def test_handler_errors_propagate_instead_of_denying(event):
    async def decide(event, context):
        raise RuntimeError("identity provider unavailable")

    with pytest.raises(RuntimeError, match="identity provider unavailable"):
        _invoke(decide, event)


def test_from_value_reads_protocol_mapping():
    result = AuthResult.from_value(
        {
            "authorized": True,
            "principalId": "u1",
            "context": {"k": "v"},
            "policyDocument": {"Statement": []},
            "usageIdentifierKey": "key",
        }
    )

    assert result == AuthResult(
        authorized=True,
        principal_id="u1",
        context={"k": "v"},
        policy_document={"Statement": []},
        usage_identifier_key="key",
    )


def test_from_value_requires_authorized():
    with pytest.raises(KeyError):
        AuthResult.from_value({"principalId": "u1"})
