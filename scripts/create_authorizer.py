#!/usr/bin/env python3
"""Register an authorizer on an existing API Gateway v2 API."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Ensure repository root is importable when running via uv project context.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

def _env_name_for_option(option: str) -> str:
    return option.lstrip("-").replace("-", "_").upper()


def _resolve_opt(action: argparse.Action, cli_value: str | None, required: bool = True) -> str | None:
    if cli_value:
        return cli_value
    long_opts = [opt for opt in action.option_strings if opt.startswith("--")]
    canonical_opt = long_opts[0] if long_opts else action.option_strings[0]
    env_name = _env_name_for_option(canonical_opt)
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    if required:
        raise RuntimeError(f"Missing {canonical_opt}. Provide {canonical_opt} or set {env_name}.")
    return None


def main() -> None:
    parser = argparse.ArgumentParser(description="Register an API Gateway authorizer")
    api_action = parser.add_argument("--api-id", help="API id (or use API_ID)")
    parser.add_argument("--name", required=True, help="Authorizer name")
    parser.add_argument("--jwt-issuer", help="Issuer URL for a JWT authorizer")
    parser.add_argument(
        "--jwt-audience",
        action="append",
        default=[],
        help="Allowed audience (repeatable)",
    )
    parser.add_argument("--identity-source", help="JWT identity source expression")
    parser.add_argument("--function-handler", help="Handler for a function-backed authorizer")
    parser.add_argument("--function-code", help="Zip path or s3://bucket/key for the function")
    role_action = parser.add_argument(
        "--authorizer-role-arn",
        "--role-arn",
        dest="role_arn",
        help="Function execution role (or use AUTHORIZER_ROLE_ARN)",
    )
    region_action = parser.add_argument(
        "--aws-region",
        "--region",
        dest="aws_region",
        help="AWS region (or use AWS_REGION)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log provisioning steps")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    api_id = _resolve_opt(api_action, args.api_id)
    region = _resolve_opt(region_action, args.aws_region, required=False)

    from gateway_auth.backends.aws.provisioner import ApiGatewayProvisioner
    from gateway_auth.core.configurator import AuthorizerSpec, JwtConfig, configure

    function = None
    if args.function_handler:
        function = {"handler": args.function_handler, "code": args.function_code}

    jwt = None
    if args.jwt_issuer:
        jwt = JwtConfig(
            issuer=args.jwt_issuer,
            audiences=args.jwt_audience,
            identity_source=args.identity_source,
        )

    spec = AuthorizerSpec(name=args.name, function=function, jwt=jwt)

    role = _resolve_opt(role_action, args.role_arn, required=function is not None)
    provisioner = ApiGatewayProvisioner(region_name=region, default_role_arn=role or "")
    api = provisioner.lookup_api(api_id)
    descriptor = configure(spec, api, provisioner)

    summary = {"id": descriptor.id, "type": descriptor.type}
    if descriptor.type == "REQUEST":
        summary["function"] = descriptor.backing_function
        summary["permission"] = descriptor.invoke_permission
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
