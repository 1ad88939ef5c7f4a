"""PostgreSQL implementation of LedgerRepository."""

from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.metrics import record_ledger_error
from src.domain.entities import (
    AppliedOrder,
    CreditTransaction,
    CustomerLedger,
    LedgerEntry,
    MonthKey,
    TransactionKind,
)
from src.domain.exceptions import (
    DuplicateOrderException,
    LedgerConflictException,
    LedgerCorruptionException,
    LedgerUnavailableException,
)
from src.domain.interfaces import LedgerRepository
from src.infrastructure.database.models import (
    AppliedOrderModel,
    CreditTransactionModel,
    CustomerLedgerModel,
    LedgerEntryModel,
    utc_now,
)

logger = structlog.get_logger(__name__)


class PostgresLedgerRepository(LedgerRepository):
    """
    PostgreSQL implementation of the ledger store.

    ``save`` locks the customer row (SELECT ... FOR UPDATE) and compares
    the stored version with the one the ledger was read at, so concurrent
    read-modify-writes for the same customer cannot lose updates.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, customer_id: str) -> Optional[CustomerLedger]:
        """Load a customer's ledger with all entries and history."""
        stmt = (
            self._ledger_query(customer_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            record_ledger_error("unavailable")
            logger.error("ledger_load_failed", customer_id=customer_id, error=str(e))
            raise LedgerUnavailableException(f"Failed to load ledger: {e}") from e

        if model is None:
            return None

        return self._to_entity(model)

    async def save(self, ledger: CustomerLedger) -> CustomerLedger:
        """Persist a ledger read at ``ledger.version``."""
        try:
            model = await self._lock_for_update(ledger)

            existing_orders = {o.order_id for o in model.applied_orders} if model else set()
            new_order_ids = [oid for oid in ledger.applied_orders if oid not in existing_orders]
            await self._ensure_orders_unclaimed(new_order_ids)

            now = utc_now()
            if model is None:
                model = CustomerLedgerModel(
                    customer_id=ledger.customer_id,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
                self._session.add(model)
            else:
                model.version += 1
                model.updated_at = now

            self._sync_entries(model, ledger)
            self._sync_orders(model, ledger, new_order_ids)
            self._sync_transactions(model, ledger)

            await self._session.flush()

        except IntegrityError as e:
            # Another writer created the same customer or order concurrently
            await self._session.rollback()
            raise LedgerConflictException(ledger.customer_id, ledger.version) from e
        except SQLAlchemyError as e:
            record_ledger_error("unavailable")
            logger.error(
                "ledger_save_failed",
                customer_id=ledger.customer_id,
                error=str(e),
            )
            raise LedgerUnavailableException(f"Failed to save ledger: {e}") from e

        ledger.version = model.version
        return ledger

    async def list_months(self, customer_id: str) -> List[MonthKey]:
        """List month keys with entries for a customer, ascending."""
        stmt = (
            select(LedgerEntryModel.year, LedgerEntryModel.month)
            .where(LedgerEntryModel.customer_id == customer_id)
            .order_by(LedgerEntryModel.year.asc(), LedgerEntryModel.month.asc())
        )
        try:
            result = await self._session.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            record_ledger_error("unavailable")
            raise LedgerUnavailableException(f"Failed to list months: {e}") from e

        return [self._month_key(customer_id, year, month) for year, month in rows]

    def _ledger_query(self, customer_id: str):
        return (
            select(CustomerLedgerModel)
            .options(
                selectinload(CustomerLedgerModel.entries),
                selectinload(CustomerLedgerModel.applied_orders),
                selectinload(CustomerLedgerModel.transactions),
            )
            .where(CustomerLedgerModel.customer_id == customer_id)
        )

    async def _lock_for_update(self, ledger: CustomerLedger) -> Optional[CustomerLedgerModel]:
        """Lock the stored row and check the version; None for a new ledger."""
        stmt = (
            self._ledger_query(ledger.customer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if ledger.version == 0:
            if model is not None:
                raise LedgerConflictException(ledger.customer_id, ledger.version)
            return None

        if model is None or model.version != ledger.version:
            raise LedgerConflictException(ledger.customer_id, ledger.version)

        return model

    async def _ensure_orders_unclaimed(self, order_ids: List[str]) -> None:
        """Order ids are unique across all customers."""
        if not order_ids:
            return

        stmt = select(AppliedOrderModel.order_id).where(
            AppliedOrderModel.order_id.in_(order_ids)
        )
        result = await self._session.execute(stmt)
        taken = result.scalars().first()
        if taken is not None:
            raise DuplicateOrderException(taken)

    def _sync_entries(self, model: CustomerLedgerModel, ledger: CustomerLedger) -> None:
        rows = {(row.year, row.month): row for row in model.entries}

        for month, entry in ledger.entries.items():
            row = rows.get((month.year, month.month))
            if row is None:
                model.entries.append(
                    LedgerEntryModel(
                        customer_id=ledger.customer_id,
                        year=month.year,
                        month=month.month,
                        revenue_cents=entry.revenue_cents,
                        earned_cents=entry.earned_cents,
                        redeemed_cents=entry.redeemed_cents,
                    )
                )
            else:
                row.revenue_cents = entry.revenue_cents
                row.earned_cents = entry.earned_cents
                row.redeemed_cents = entry.redeemed_cents

    def _sync_orders(
        self,
        model: CustomerLedgerModel,
        ledger: CustomerLedger,
        new_order_ids: List[str],
    ) -> None:
        for order_id in new_order_ids:
            order = ledger.applied_orders[order_id]
            model.applied_orders.append(
                AppliedOrderModel(
                    order_id=order.order_id,
                    customer_id=ledger.customer_id,
                    year=order.month.year,
                    month=order.month.month,
                    order_total_cents=order.order_total_cents,
                    credit_cents=order.credit_cents,
                    rate_bps=order.rate_bps,
                    processed_at=order.processed_at,
                )
            )

    def _sync_transactions(self, model: CustomerLedgerModel, ledger: CustomerLedger) -> None:
        stored = {UUID(str(row.id)) for row in model.transactions}

        for txn in ledger.history:
            if txn.id in stored:
                continue
            model.transactions.append(
                CreditTransactionModel(
                    id=str(txn.id),
                    customer_id=ledger.customer_id,
                    kind=txn.kind.value,
                    amount_cents=txn.amount_cents,
                    year=txn.month.year,
                    month=txn.month.month,
                    reference=txn.reference,
                    description=txn.description,
                    created_at=txn.created_at,
                )
            )

    def _month_key(self, customer_id: str, year: int, month: int) -> MonthKey:
        try:
            return MonthKey(year, month)
        except ValueError as e:
            record_ledger_error("corruption")
            raise LedgerCorruptionException(
                f"Invalid stored month {year}-{month}",
                customer_id=customer_id,
            ) from e

    def _to_entity(self, model: CustomerLedgerModel) -> CustomerLedger:
        """Convert database rows to a domain ledger, validating as we go."""
        customer_id = model.customer_id
        ledger = CustomerLedger(customer_id=customer_id, version=model.version)

        for row in model.entries:
            month = self._month_key(customer_id, row.year, row.month)
            if month in ledger.entries:
                record_ledger_error("corruption")
                raise LedgerCorruptionException(
                    f"Duplicate entry for month {month}",
                    customer_id=customer_id,
                )
            ledger.entries[month] = LedgerEntry(
                month=month,
                revenue_cents=row.revenue_cents,
                earned_cents=row.earned_cents,
                redeemed_cents=row.redeemed_cents,
            )

        for row in model.applied_orders:
            ledger.applied_orders[row.order_id] = AppliedOrder(
                order_id=row.order_id,
                month=self._month_key(customer_id, row.year, row.month),
                order_total_cents=row.order_total_cents,
                credit_cents=row.credit_cents,
                rate_bps=row.rate_bps,
                processed_at=row.processed_at,
            )

        for row in model.transactions:
            try:
                kind = TransactionKind(row.kind)
            except ValueError as e:
                record_ledger_error("corruption")
                raise LedgerCorruptionException(
                    f"Unknown transaction kind {row.kind!r}",
                    customer_id=customer_id,
                ) from e
            ledger.history.append(
                CreditTransaction(
                    id=UUID(str(row.id)),
                    kind=kind,
                    amount_cents=row.amount_cents,
                    month=self._month_key(customer_id, row.year, row.month),
                    reference=row.reference,
                    description=row.description,
                    created_at=row.created_at,
                )
            )

        try:
            ledger.check_integrity()
        except LedgerCorruptionException:
            record_ledger_error("corruption")
            raise

        return ledger
