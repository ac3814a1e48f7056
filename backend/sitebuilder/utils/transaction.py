# sitebuilder/utils/transaction.py
import logging
from contextlib import contextmanager
from typing import Callable, List

from sqlalchemy.exc import SQLAlchemyError

from sitebuilder.domain.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Handle yielded by ``unit_of_work``.

    Side effects outside the database (files written to disk) register a
    compensation so they are undone if the unit does not commit.
    """

    def __init__(self, session):
        self.session = session
        self._compensations: List[Callable[[], object]] = []

    def on_rollback(self, compensation: Callable[[], object]) -> None:
        self._compensations.append(compensation)

    def compensate(self) -> None:
        for compensation in reversed(self._compensations):
            try:
                compensation()
            except OSError:
                logger.exception("Compensation step failed during rollback")
        self._compensations.clear()


@contextmanager
def unit_of_work(session):
    """
    Commit on success, roll back on any error.

    Storage errors surface as PersistenceFailure; anything else is
    re-raised unchanged after the rollback.
    """
    uow = UnitOfWork(session)
    try:
        yield uow
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        uow.compensate()
        raise PersistenceFailure(f"Storage write failed: {exc}") from exc
    except Exception:
        session.rollback()
        uow.compensate()
        raise
