"""
SequenceService -- per-scope sequence allocation via locked counter rows.

Responsibility:
    Hands out the numbers behind document human codes.  Each (issuing
    company, document type) pair owns one counter row; the increment is
    a single ``UPDATE ... SET current_value = current_value + 1`` that
    takes the row lock, so two concurrent creators can never read the
    same value.  Counting existing documents and adding one is never
    used.

Transactional:
    The increment is only visible once the caller's transaction commits.
    A rolled back creation returns its number.

Failure modes:
    - IntegrityError on the first use of a scope when two transactions
      create the counter row at once: handled by a savepoint and a retry
      of the increment.
"""

from sqlalchemy import BigInteger, String, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session, mapped_column

from tradedoc_kernel.db.base import Base
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("services.sequence")


class SequenceCounter(Base):
    """One row per named sequence."""

    __tablename__ = "sequence_counters"

    # e.g. "human_code:<company uuid>:purchase_order"
    name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
    )

    current_value: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )


class SequenceService:
    """
    Transactional sequence numbers.

    Usage:
        value = SequenceService(session).next_value(sequence_name(company_id, "invoice"))
        # commit the caller's transaction to keep it; roll back to return it

    Does not commit.
    """

    def __init__(self, session: Session):
        self._session = session

    def _increment(self, sequence_name: str) -> bool:
        result = self._session.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .values(current_value=SequenceCounter.current_value + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _read(self, sequence_name: str) -> int:
        return self._session.execute(
            select(SequenceCounter.current_value)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
        ).scalar_one()

    def next_value(self, sequence_name: str) -> int:
        """
        Allocate the next value (always > 0) for ``sequence_name``.

        The counter row stays locked until the caller's transaction ends.
        """
        if not self._increment(sequence_name):
            # First use of this scope.  Savepoint so a lost creation race
            # does not roll back the caller's other work.
            savepoint = self._session.begin_nested()
            try:
                self._session.add(SequenceCounter(name=sequence_name, current_value=1))
                self._session.flush()
                savepoint.commit()
                logger.debug(
                    "sequence_allocated",
                    extra={"sequence_name": sequence_name, "value": 1},
                )
                return 1
            except IntegrityError:
                logger.debug(
                    "sequence_counter_race_retry",
                    extra={"sequence_name": sequence_name},
                )
                savepoint.rollback()
                if not self._increment(sequence_name):
                    raise

        value = self._read(sequence_name)
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": value},
        )
        return value

    def current_value(self, sequence_name: str) -> int | None:
        """Current value without incrementing, or None if never used."""
        return self._session.execute(
            select(SequenceCounter.current_value)
            .where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()
