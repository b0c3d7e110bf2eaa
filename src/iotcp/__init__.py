"""iotcp — route dispatch and response authorization for ledger asset contracts."""

__version__ = "0.1.0"
