"""Infrastructure layer — local ledger stubs.

The production ledger is external. These stubs implement
:class:`iotcp.domain.ledger.LedgerStub` for tests, embedding, and the CLI.
"""
