"""Typed payload contracts for documents leaving the dispatcher.

These models validate payload shapes before they are serialized, so key
regressions (for example ``functionName`` vs ``functionname``) fail fast
in tests.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return the wire-form dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json", by_alias=True)


class RouteClass(BaseModel):
    """Owning asset class as it appears in route listings."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    prefix: str
    asset_id_path: str = Field(alias="assetIDpath")


class RouteOut(BaseModel):
    """One row returned by ``readAllRoutes``."""

    model_config = ConfigDict(populate_by_name=True)

    functionname: str
    method: Literal["deploy", "invoke", "query"]
    owner: RouteClass = Field(alias="class")
