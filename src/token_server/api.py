"""Request payloads for the token endpoints."""

from dataclasses import dataclass
from typing import Any

from token_server.store import MetaData


class ApiError(Exception):
    """Error during request processing, mapped to an HTTP status."""

    def __init__(self, message: str, code: str, status_code: int = 422):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


@dataclass
class CreatePayload:
    meta: Any


@dataclass
class UpdatePayload:
    token: str
    meta: Any = None


@dataclass
class RemovePayload:
    token: str


@dataclass
class UpdateResponsePayload:
    token: str
    meta: MetaData

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "meta": self.meta}


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ApiError("Request body must be a JSON object", "INVALID_REQUEST")
    return body


def _require_token(body: dict[str, Any]) -> str:
    if "token" not in body:
        raise ApiError("Missing required field: token", "INVALID_REQUEST")
    token = body["token"]
    if not isinstance(token, str):
        raise ApiError("Field 'token' must be a string", "INVALID_REQUEST")
    return token


def parse_create_payload(body: Any) -> CreatePayload:
    """Parse a POST /token body. Shape of ``meta`` is checked by the store."""
    body = _require_object(body)
    if "meta" not in body:
        raise ApiError("Missing required field: meta", "INVALID_REQUEST")
    return CreatePayload(meta=body["meta"])


def parse_update_payload(body: Any) -> UpdatePayload:
    body = _require_object(body)
    return UpdatePayload(token=_require_token(body), meta=body.get("meta"))


def parse_remove_payload(body: Any) -> RemovePayload:
    body = _require_object(body)
    return RemovePayload(token=_require_token(body))
