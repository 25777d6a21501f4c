"""Reference implementations of the external collaborator ports."""

from staking_kernel.adapters.in_memory_ledger import (
    InMemoryAssetLedger,
    StaticAdministratorGate,
    TransferLogEntry,
)

__all__ = ["InMemoryAssetLedger", "StaticAdministratorGate", "TransferLogEntry"]
