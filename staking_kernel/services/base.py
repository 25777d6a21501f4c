"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for every
    write-side service.  Concrete services receive a SQLAlchemy ``Session``
    and use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or roll back themselves.  StakingEngine (or the test
    harness) owns commit/rollback.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from staking_kernel.db.base import Base
from staking_kernel.domain.clock import Clock, SystemClock

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.

    Non-goals:
        - Does NOT provide query-only (read) methods -- those belong in
          ``staking_kernel/selectors/``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
            clock: Time source.  Defaults to SystemClock.
        """
        self.session = session
        self.clock = clock or SystemClock()
