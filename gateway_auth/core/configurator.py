"""Authorizer configuration — validates a spec and provisions its resources.

Cloud-agnostic: depends only on the Provisioner protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Union

from gateway_auth.core.errors import ConfigurationError, InvalidAccessError
from gateway_auth.core.interfaces import Provisioner

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_SOURCE = "$request.header.Authorization"
# 1.0 is the only version supported for WebSocket APIs.
PAYLOAD_FORMAT_VERSION = "1.0"
GATEWAY_PRINCIPAL = "apigateway.amazonaws.com"

FunctionRef = Union[str, dict]
Transform = Union[dict, Callable[[dict], Union[dict, None]]]


@dataclass(frozen=True)
class OwnerApi:
    id: str
    name: str
    execution_arn: str


@dataclass(frozen=True)
class JwtConfig:
    issuer: str
    audiences: list[str]
    identity_source: str | None = None


@dataclass(frozen=True)
class FunctionMode:
    definition: dict


@dataclass(frozen=True)
class JwtMode:
    issuer: str
    audiences: list[str]
    identity_source: str


AuthorizerMode = Union[FunctionMode, JwtMode]


@dataclass(frozen=True)
class AuthorizerSpec:
    """Declarative authorizer configuration.

    Exactly one of ``function`` or ``jwt`` must be populated. The mode is
    resolved once, at construction, so an invalid spec never exists.
    """

    name: str
    function: FunctionRef | None = None
    jwt: JwtConfig | None = None
    transform: Transform | None = None
    _mode: AuthorizerMode = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("Authorizer configuration has no name.")
        object.__setattr__(self, "_mode", _resolve_mode(self.name, self.function, self.jwt))

    @classmethod
    def from_dict(cls, payload: dict) -> AuthorizerSpec:
        """Build a spec from a JSON-style payload."""
        name = payload.get("name")
        if not name:
            raise ConfigurationError("Authorizer configuration has no name.")

        jwt = payload.get("jwt")
        if jwt and not isinstance(jwt, dict):
            raise ConfigurationError(f"The jwt config for the {name} authorizer must be a mapping.")

        return cls(
            name=name,
            function=payload.get("function"),
            jwt=(
                JwtConfig(
                    issuer=jwt.get("issuer", ""),
                    audiences=list(jwt.get("audiences", [])),
                    identity_source=jwt.get("identitySource"),
                )
                if jwt
                else None
            ),
        )

    def mode(self) -> AuthorizerMode:
        return self._mode


def _resolve_mode(name: str, function: FunctionRef | None, jwt: JwtConfig | None) -> AuthorizerMode:
    populated = [option for option in (function, jwt) if option]
    if not populated:
        raise ConfigurationError(
            f'Please provide one of "function" or "jwt" for the {name} authorizer.'
        )
    if len(populated) > 1:
        raise ConfigurationError(
            f'Please provide only one of "function" or "jwt" for the {name} authorizer.'
        )

    if jwt:
        if not jwt.issuer:
            raise ConfigurationError(f"The jwt config for the {name} authorizer has no issuer.")
        return JwtMode(
            issuer=jwt.issuer,
            audiences=list(jwt.audiences),
            identity_source=(
                DEFAULT_IDENTITY_SOURCE if jwt.identity_source is None else jwt.identity_source
            ),
        )
    return FunctionMode(definition=function_definition(name, function))


def function_definition(name: str, ref: FunctionRef) -> dict:
    """Normalize a handler string or definition mapping into a definition."""
    if isinstance(ref, str):
        return {"handler": ref}
    if not isinstance(ref, dict):
        raise ConfigurationError(
            f"The function for the {name} authorizer must be a handler string or a mapping."
        )
    if not ref.get("handler"):
        raise ConfigurationError(f"The function for the {name} authorizer has no handler.")
    return dict(ref)


def authorizer_type(mode: AuthorizerMode) -> str:
    if isinstance(mode, JwtMode):
        return "JWT"
    return "REQUEST"


@dataclass(frozen=True)
class AuthorizerDescriptor:
    """The provisioned authorizer and the resources it owns."""

    name: str
    type: str
    authorizer: dict
    _function: dict | None = field(default=None, repr=False)
    _permission: dict | None = field(default=None, repr=False)

    @property
    def id(self) -> str:
        return self.authorizer["id"]

    @property
    def backing_function(self) -> dict:
        if self._function is None:
            raise InvalidAccessError(
                f"Cannot access the backing function of the {self.name} authorizer "
                "because it does not use a function."
            )
        return self._function

    @property
    def invoke_permission(self) -> dict:
        if self._permission is None:
            raise InvalidAccessError(
                f"Cannot access the invoke permission of the {self.name} authorizer "
                "because it does not use a function."
            )
        return self._permission

    def nodes(self) -> dict:
        """Return the underlying resource handles that were actually created."""
        nodes = {"authorizer": self.authorizer}
        if self._function is not None:
            nodes["function"] = self._function
        if self._permission is not None:
            nodes["permission"] = self._permission
        return nodes


def configure(
    spec: AuthorizerSpec,
    api: OwnerApi,
    provisioner: Provisioner,
) -> AuthorizerDescriptor:
    """Validate an authorizer spec and register it against ``api``.

    Validation runs before any provisioning call. For a function-backed spec
    the function is created first, then the authorizer, then a permission
    scoped to that single authorizer.
    """
    mode = spec.mode()
    kind = authorizer_type(mode)
    args = {"ApiId": api.id, "Name": spec.name, "AuthorizerType": kind}

    if isinstance(mode, JwtMode):
        args["IdentitySource"] = [mode.identity_source]
        args["JwtConfiguration"] = {"Audience": mode.audiences, "Issuer": mode.issuer}
        authorizer = _register(spec, args, provisioner)
        logger.info("Registered JWT authorizer %s on api %s", authorizer["id"], api.id)
        return AuthorizerDescriptor(name=spec.name, type=kind, authorizer=authorizer)

    fn = provisioner.create_function(
        f"{spec.name}LambdaAuthorizerFn",
        mode.definition,
        description=f"{api.name} authorizer function",
    )
    logger.info("Created authorizer function %s", fn["arn"])

    args["AuthorizerUri"] = fn["invoke_arn"]
    args["AuthorizerPayloadFormatVersion"] = PAYLOAD_FORMAT_VERSION
    authorizer = _register(spec, args, provisioner)
    logger.info("Registered REQUEST authorizer %s on api %s", authorizer["id"], api.id)

    permission = provisioner.create_permission(
        f"{spec.name}Permission",
        {
            "FunctionName": fn["arn"],
            "StatementId": f"{spec.name}Permission",
            "Action": "lambda:InvokeFunction",
            "Principal": GATEWAY_PRINCIPAL,
            "SourceArn": f"{api.execution_arn}/authorizers/{authorizer['id']}",
        },
    )

    return AuthorizerDescriptor(
        name=spec.name,
        type=kind,
        authorizer=authorizer,
        _function=fn,
        _permission=permission,
    )


def _register(spec: AuthorizerSpec, args: dict, provisioner: Provisioner) -> dict:
    if callable(spec.transform):
        replaced = spec.transform(args)
        if replaced is not None:
            args = replaced
    elif spec.transform:
        args = {**args, **spec.transform}
    return provisioner.create_authorizer(f"{spec.name}Authorizer", args)
