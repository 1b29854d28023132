"""Mock provisioner for testing."""

from __future__ import annotations

import uuid

MOCK_ACCOUNT = "123456789012"
MOCK_REGION = "us-east-1"


class MockProvisioner:
    """Records provisioning requests and hands back fake resource handles.

    Handles have the same shape as the AWS backend's. ``calls`` keeps
    (kind, name, args) in the order requests were made so tests can check
    sequencing and arguments.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, dict]] = []
        self.functions: dict[str, dict] = {}
        self.authorizers: dict[str, dict] = {}
        self.permissions: dict[str, dict] = {}

    def create_function(self, name: str, definition: dict, description: str) -> dict:
        self.calls.append(("function", name, {"definition": definition, "description": description}))
        arn = f"arn:aws:lambda:{MOCK_REGION}:{MOCK_ACCOUNT}:function:{name}"
        fn = {
            "name": name,
            "arn": arn,
            "invoke_arn": (
                f"arn:aws:apigateway:{MOCK_REGION}:lambda:path/2015-03-31"
                f"/functions/{arn}/invocations"
            ),
        }
        self.functions[name] = fn
        return fn

    def create_authorizer(self, name: str, args: dict) -> dict:
        self.calls.append(("authorizer", name, args))
        authorizer = {"id": f"auth-mock-{uuid.uuid4().hex[:8]}", "name": args.get("Name", name)}
        self.authorizers[authorizer["id"]] = authorizer
        return authorizer

    def create_permission(self, name: str, args: dict) -> dict:
        self.calls.append(("permission", name, args))
        permission = {
            "statement_id": args["StatementId"],
            "source_arn": args["SourceArn"],
            "statement": {
                "Sid": args["StatementId"],
                "Effect": "Allow",
                "Principal": {"Service": args["Principal"]},
                "Action": args["Action"],
                "Resource": args["FunctionName"],
                "Condition": {"ArnLike": {"AWS:SourceArn": args["SourceArn"]}},
            },
        }
        self.permissions[name] = permission
        return permission
