"""
Staking Kernel - fixed-APY staking ledger

A deterministic, append-only staking ledger with:
- Exactly-three-slot term table (versioned)
- Deposit lifecycle with exactly-once finalization
- Step-wise truncating reward accrual
- Atomic operations (savepoint + compensating transfers)
- Hash-chained staking records
"""

__version__ = "0.1.0"
