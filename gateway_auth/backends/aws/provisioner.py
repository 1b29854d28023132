"""API Gateway v2 / Lambda provisioner — creates authorizer resources."""

from __future__ import annotations

import json
from pathlib import Path

import boto3

from gateway_auth.core.configurator import OwnerApi
from gateway_auth.core.errors import ConfigurationError
from gateway_auth.shared.config import DEFAULT_RUNTIME


class ApiGatewayProvisioner:
    def __init__(
        self,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        default_role_arn: str = "",
    ):
        kwargs = {}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if region_name:
            kwargs["region_name"] = region_name
        self._apigw = boto3.client("apigatewayv2", **kwargs)
        self._lambda = boto3.client("lambda", **kwargs)
        self._sts = boto3.client("sts", **kwargs)
        self._default_role_arn = default_role_arn

    @property
    def region(self) -> str:
        return self._lambda.meta.region_name

    def create_function(self, name: str, definition: dict, description: str) -> dict:
        """Create the authorizer's Lambda function.

        Returns {"name", "arn", "invoke_arn"}.
        """
        role = definition.get("role") or self._default_role_arn
        if not role:
            raise ConfigurationError(f"No execution role configured for function {name}")

        params = {
            "FunctionName": name,
            "Runtime": definition.get("runtime", DEFAULT_RUNTIME),
            "Role": role,
            "Handler": definition["handler"],
            "Code": self._code(definition.get("code")),
            "Description": description,
            "Timeout": int(definition.get("timeout", 5)),
            "MemorySize": int(definition.get("memory_size", 128)),
        }
        if definition.get("environment"):
            params["Environment"] = {"Variables": dict(definition["environment"])}

        resp = self._lambda.create_function(**params)
        arn = resp["FunctionArn"]
        partition = arn.split(":")[1]
        return {
            "name": resp["FunctionName"],
            "arn": arn,
            "invoke_arn": (
                f"arn:{partition}:apigateway:{self.region}:lambda:path/2015-03-31"
                f"/functions/{arn}/invocations"
            ),
        }

    def create_authorizer(self, name: str, args: dict) -> dict:
        resp = self._apigw.create_authorizer(**args)
        return {"id": resp["AuthorizerId"], "name": resp.get("Name", name)}

    def create_permission(self, name: str, args: dict) -> dict:
        resp = self._lambda.add_permission(**args)
        return {
            "statement_id": args["StatementId"],
            "source_arn": args["SourceArn"],
            "statement": json.loads(resp["Statement"]),
        }

    def lookup_api(self, api_id: str) -> OwnerApi:
        """Resolve an API id into the reference authorizers are attached to."""
        api = self._apigw.get_api(ApiId=api_id)
        identity = self._sts.get_caller_identity()
        partition = identity["Arn"].split(":")[1]
        return OwnerApi(
            id=api_id,
            name=api["Name"],
            execution_arn=(
                f"arn:{partition}:execute-api:{self.region}:{identity['Account']}:{api_id}"
            ),
        )

    def _code(self, code) -> dict:
        """Accept a boto3 Code mapping, an s3:// URI or a local zip path."""
        if isinstance(code, dict):
            return code
        if not code:
            raise ConfigurationError("Function definition has no code")
        if code.startswith("s3://"):
            bucket, _, key = code[len("s3://"):].partition("/")
            return {"S3Bucket": bucket, "S3Key": key}
        return {"ZipFile": Path(code).read_bytes()}
