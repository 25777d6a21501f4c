"""Write-side kernel services.  StakingEngine is the transactional entry point."""

from staking_kernel.services.custody import CustodyGateway
from staking_kernel.services.deposit_ledger import DepositLedgerService
from staking_kernel.services.record_service import RecordEntry, RecordService
from staking_kernel.services.sequence_service import SequenceService
from staking_kernel.services.staking_engine import EngineSettings, StakingEngine
from staking_kernel.services.term_table_service import TermTableService

__all__ = [
    "CustodyGateway",
    "DepositLedgerService",
    "EngineSettings",
    "RecordEntry",
    "RecordService",
    "SequenceService",
    "StakingEngine",
    "TermTableService",
]
