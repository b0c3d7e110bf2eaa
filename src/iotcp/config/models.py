"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, iotcp.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class ContractConfig(BaseModel):
    """[contract] section."""

    model_config = {"frozen": True}

    version: str = "1.0.0"


class LedgerConfig(BaseModel):
    """[ledger] section.

    ``path`` is resolved against the project root when relative.
    """

    model_config = {"frozen": True}

    path: str = ".iotcp/ledger.db"


class PluginsConfig(BaseModel):
    """[plugins] section — built-in asset classes."""

    model_config = {"frozen": True}

    shipment: bool = True
