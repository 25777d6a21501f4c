"""
Typed Exception Hierarchy for the Staking Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every staking failure is surfaced verbatim to the caller and never retried.
Callers must be able to tell a premature withdrawal from a foreign caller or
a failed custody transfer without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        engine.unstake(caller="alice", deposit_id=3)
    except TermNotElapsedError as e:
        return {"error": e.code, "end_time": e.end_time, "now": e.now}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from StakingKernelError:

    StakingKernelError (base)
    |
    +-- TermTableError
    |   +-- InvalidTermError
    |   +-- InvalidConfigurationSizeError
    |   +-- InvalidConfigurationValueError
    |   +-- TermTableNotInitializedError
    |
    +-- DepositError
    |   +-- InvalidAmountError
    |   +-- DepositNotFoundError
    |   +-- NotOwnerError
    |   +-- AlreadyFinalizedError
    |   +-- TermNotElapsedError
    |
    +-- CustodyError
    |   +-- InsufficientCallerBalanceError
    |   +-- InsufficientRewardCustodyError
    |   +-- TransferFailedError
    |
    +-- AuthorizationError
    |   +-- NotAdministratorError
    |
    +-- ImmutabilityError
    |   +-- ImmutabilityViolationError
    |
    +-- RecordError
        +-- RecordChainBrokenError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                         | When Raised
----------------|------------------------------|----------------------------------------
Term table      | INVALID_TERM                 | Stake term not in current table
                | INVALID_CONFIGURATION_SIZE   | Update array longer than 3
                | INVALID_CONFIGURATION_VALUE  | Non-positive duration / negative yield
                | TERM_TABLE_NOT_INITIALIZED   | No term table version persisted yet
----------------|------------------------------|----------------------------------------
Deposit         | INVALID_AMOUNT               | Negative or non-integer stake amount
                | DEPOSIT_NOT_FOUND            | No deposit at that ledger position
                | NOT_OWNER                    | Caller is not the deposit owner
                | ALREADY_FINALIZED            | Deposit already unstaked
                | TERM_NOT_ELAPSED             | Unstake before end_time
----------------|------------------------------|----------------------------------------
Custody         | INSUFFICIENT_CALLER_BALANCE  | Stake exceeds caller balance
                | INSUFFICIENT_REWARD_CUSTODY  | Reward custody below principal
                | TRANSFER_FAILED              | Asset ledger returned False / raised
----------------|------------------------------|----------------------------------------
Authorization   | NOT_ADMINISTRATOR            | Term table mutation by non-admin
----------------|------------------------------|----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION       | Modifying a finalized/immutable row
----------------|------------------------------|----------------------------------------
Records         | RECORD_CHAIN_BROKEN          | Staking record hash chain mismatch

===============================================================================
"""


class StakingKernelError(Exception):
    """
    Base exception for all staking kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STAKING_KERNEL_ERROR"


# Term table exceptions


class TermTableError(StakingKernelError):
    """Base exception for term table errors."""

    code: str = "TERM_TABLE_ERROR"


class InvalidTermError(TermTableError):
    """Requested stake term is not accepted by the current term table."""

    code: str = "INVALID_TERM"

    def __init__(self, term: int, durations: tuple[int, ...]):
        self.term = term
        self.durations = durations
        super().__init__(
            f"Term {term} is not one of the configured durations {list(durations)}"
        )


class InvalidConfigurationSizeError(TermTableError):
    """A term table update supplied more than three entries."""

    code: str = "INVALID_CONFIGURATION_SIZE"

    def __init__(self, field: str, size: int, max_size: int = 3):
        self.field = field
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Cannot update {field}: {size} entries supplied, at most {max_size} allowed"
        )


class InvalidConfigurationValueError(TermTableError):
    """A term table update supplied a value outside its domain."""

    code: str = "INVALID_CONFIGURATION_VALUE"

    def __init__(self, field: str, index: int, value: object, reason: str):
        self.field = field
        self.index = index
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}[{index}] = {value!r}: {reason}")


class TermTableNotInitializedError(TermTableError):
    """No term table version has been persisted yet."""

    code: str = "TERM_TABLE_NOT_INITIALIZED"

    def __init__(self):
        super().__init__("Term table has not been initialized")


# Deposit exceptions


class DepositError(StakingKernelError):
    """Base exception for deposit lifecycle errors."""

    code: str = "DEPOSIT_ERROR"


class InvalidAmountError(DepositError):
    """Stake amount is negative or not an integer quantity."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Invalid stake amount: {amount!r}")


class DepositNotFoundError(DepositError):
    """No deposit exists at the given ledger position."""

    code: str = "DEPOSIT_NOT_FOUND"

    def __init__(self, deposit_id: int):
        self.deposit_id = deposit_id
        super().__init__(f"Deposit not found: {deposit_id}")


class NotOwnerError(DepositError):
    """Caller is not the owner of the deposit."""

    code: str = "NOT_OWNER"

    def __init__(self, deposit_id: int, caller: str, owner: str):
        self.deposit_id = deposit_id
        self.caller = caller
        self.owner = owner
        super().__init__(
            f"Account {caller} is not the owner of deposit {deposit_id}"
        )


class AlreadyFinalizedError(DepositError):
    """Deposit has already been unstaked."""

    code: str = "ALREADY_FINALIZED"

    def __init__(self, deposit_id: int):
        self.deposit_id = deposit_id
        super().__init__(f"Deposit {deposit_id} has already been finalized")


class TermNotElapsedError(DepositError):
    """Unstake attempted before the deposit's end time."""

    code: str = "TERM_NOT_ELAPSED"

    def __init__(self, deposit_id: int, end_time: int, now: int):
        self.deposit_id = deposit_id
        self.end_time = end_time
        self.now = now
        super().__init__(
            f"Deposit {deposit_id} is locked until {end_time} "
            f"({end_time - now}s remaining)"
        )


# Custody exceptions


class CustodyError(StakingKernelError):
    """Base exception for custody and transfer errors."""

    code: str = "CUSTODY_ERROR"


class InsufficientCallerBalanceError(CustodyError):
    """Caller's staked-asset balance is below the stake amount."""

    code: str = "INSUFFICIENT_CALLER_BALANCE"

    def __init__(self, caller: str, amount: int, balance: int):
        self.caller = caller
        self.amount = amount
        self.balance = balance
        super().__init__(
            f"Account {caller} cannot stake {amount}: balance is {balance}"
        )


class InsufficientRewardCustodyError(CustodyError):
    """
    Reward-asset custody holds less than the deposit principal.

    The check compares principal only, not principal plus reward.
    """

    code: str = "INSUFFICIENT_REWARD_CUSTODY"

    def __init__(self, deposit_id: int, required: int, available: int):
        self.deposit_id = deposit_id
        self.required = required
        self.available = available
        super().__init__(
            f"Reward custody holds {available}, deposit {deposit_id} "
            f"requires at least {required}"
        )


class TransferFailedError(CustodyError):
    """The external asset ledger rejected or failed a transfer."""

    code: str = "TRANSFER_FAILED"

    def __init__(self, sender: str, recipient: str, amount: int, reason: str = "rejected"):
        self.sender = sender
        self.recipient = recipient
        self.amount = amount
        self.reason = reason
        super().__init__(
            f"Transfer of {amount} from {sender} to {recipient} failed: {reason}"
        )


# Authorization exceptions


class AuthorizationError(StakingKernelError):
    """Base exception for authorization errors."""

    code: str = "AUTHORIZATION_ERROR"


class NotAdministratorError(AuthorizationError):
    """Caller is not permitted to change the term table."""

    code: str = "NOT_ADMINISTRATOR"

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(f"Account {caller} is not an administrator ({operation})")


# Immutability exceptions


class ImmutabilityError(StakingKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an immutable record.

    StakingRecord and TermTableVersion rows are immutable from creation;
    Deposit rows only change in the open -> ended transition.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )


# Record exceptions


class RecordError(StakingKernelError):
    """Base exception for staking record errors."""

    code: str = "RECORD_ERROR"


class RecordChainBrokenError(RecordError):
    """Staking record hash chain validation failed."""

    code: str = "RECORD_CHAIN_BROKEN"

    def __init__(self, record_seq: int, expected_hash: str, actual_hash: str):
        self.record_seq = record_seq
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        super().__init__(
            f"Record chain broken at seq {record_seq}: "
            f"expected {expected_hash}, got {actual_hash}"
        )
