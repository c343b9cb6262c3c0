"""Shared machinery for typed capability façades."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypeVar

from pydantic import BaseModel, ValidationError

from toolbridge.capabilities.catalog import get_capability
from toolbridge.errors import ProtocolError
from toolbridge.mcp.client import MCPClient

if TYPE_CHECKING:
    from toolbridge.mcp.models import ToolDescriptor

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_arguments(**values: Any) -> dict[str, Any]:
    """Return a tool ``arguments`` object, omitting keys whose value is ``None``."""
    return {key: value for key, value in values.items() if value is not None}


def load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Malformed {what} payload: {exc}"
        raise ProtocolError(msg) from exc


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """Validate decoded JSON as *model*, mapping failures to :class:`ProtocolError`."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        msg = f"Malformed {model.__name__} payload: {exc}"
        raise ProtocolError(msg) from exc


def decode_payload(model: type[ModelT], text: str) -> ModelT:
    return validate_payload(model, load_json(text, model.__name__))


def wrap_list(payload: Any, key: str, count_key: str | None = None) -> Any:
    """Wrap a bare list response into ``{key: [...], count_key: len}``."""
    if not isinstance(payload, list):
        return payload
    wrapped: dict[str, Any] = {key: payload}
    if count_key is not None:
        wrapped[count_key] = len(payload)
    return wrapped


class CapabilityTools:
    """Base for thin typed façades over one :class:`MCPClient`.

    Subclasses set ``capability`` to a catalog name so they can be built with
    :meth:`from_catalog`.
    """

    capability: ClassVar[str] = ""

    def __init__(self, client: MCPClient) -> None:
        self.client = client

    @classmethod
    def from_catalog(cls, **overrides: object) -> Self:
        config = get_capability(cls.capability).to_server_config(**overrides)
        return cls(MCPClient(config))

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def list_tools(self) -> list[ToolDescriptor]:
        return await self.client.list_tools()

    async def close(self) -> None:
        await self.client.close()
