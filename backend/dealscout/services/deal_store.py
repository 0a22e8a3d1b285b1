"""Persistence of computed deals.

Deals are written in chunks of at most BATCH_WRITE_SIZE records, one
transaction per chunk, with put-overwrites semantics on (pk, sk). A chunk
that fails is reported as unprocessed and the remaining chunks are still
attempted, so callers get a partial-success result instead of an error.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional, Sequence, TypeVar

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from dealscout.config import Settings, settings as default_settings
from dealscout.models.deal_record import DealRecord, partition_key
from dealscout.scrapers.base import Deal

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


@dataclass
class SaveResult:
    """Outcome of a batched save."""

    saved: int = 0
    total: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def unprocessed(self) -> int:
        return self.total - self.saved

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "saved": self.saved,
            "total": self.total,
            "errors": list(self.errors),
        }


class DealStore:
    """Writes and reads DealRecords through an async session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
        settings: Settings = default_settings,
    ):
        """Initialize the store.

        Args:
            session_factory: Factory producing AsyncSession instances
            engine: When given, tables are created on first use
            settings: Provides batch size and TTL
        """
        self.session_factory = session_factory
        self.engine = engine
        self.batch_size = min(settings.BATCH_WRITE_SIZE, 25)
        self.ttl = timedelta(hours=settings.DEAL_TTL_HOURS)
        self._schema_ready = engine is None
        self.logger = logger.bind(service="deal_store")

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        from dealscout.db.session import init_models

        await init_models(self.engine)
        self._schema_ready = True

    async def save_deals(self, deals: Sequence[Deal], now: Optional[datetime] = None) -> SaveResult:
        """Persist deals in chunks, reporting unprocessed chunks as errors.

        Args:
            deals: Deals to store
            now: Scrape timestamp (defaults to current UTC time)

        Returns:
            SaveResult with the number saved and per-chunk error messages
        """
        await self._ensure_schema()

        scraped_at = now or datetime.now(timezone.utc)
        expires_at = scraped_at + self.ttl
        result = SaveResult(total=len(deals))

        self.logger.info(
            "batch_write_started",
            total_deals=len(deals),
            retailers=sorted({d.retailer for d in deals}),
            categories=sorted({d.category for d in deals}),
        )

        for index, chunk in enumerate(chunked(deals, self.batch_size), start=1):
            try:
                async with self.session_factory() as session:
                    async with session.begin():
                        for deal in chunk:
                            await session.merge(DealRecord.from_deal(deal, scraped_at, expires_at))
            except SQLAlchemyError as e:
                message = f"{len(chunk)} items unprocessed in chunk {index}: {e.__class__.__name__}"
                self.logger.warning("chunk_unprocessed", chunk=index, unprocessed=len(chunk), error=str(e))
                result.errors.append(message)
                continue

            result.saved += len(chunk)
            self.logger.info(
                "chunk_written",
                chunk=index,
                attempted=len(chunk),
                saved=result.saved,
                expires_at=expires_at.isoformat(),
            )

        self.logger.info("batch_write_complete", saved=result.saved, errors=len(result.errors))
        return result

    async def list_deals(self, retailer: str, category: str, now: Optional[datetime] = None) -> List[Deal]:
        """Return unexpired deals stored for one retailer/category partition."""
        await self._ensure_schema()
        now = now or datetime.now(timezone.utc)

        async with self.session_factory() as session:
            rows = await session.execute(
                select(DealRecord)
                .where(DealRecord.pk == partition_key(retailer, category))
                .where(DealRecord.expires_at > now)
                .order_by(DealRecord.discount_pct.desc())
            )
            return [record.to_deal() for record in rows.scalars().all()]

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete records whose expiry has passed.

        Returns:
            Number of records deleted
        """
        await self._ensure_schema()
        now = now or datetime.now(timezone.utc)

        async with self.session_factory() as session:
            async with session.begin():
                outcome = await session.execute(delete(DealRecord).where(DealRecord.expires_at <= now))
                deleted = outcome.rowcount or 0

        self.logger.info("expired_deals_purged", count=deleted)
        return deleted


def get_deal_store() -> DealStore:
    """Build a store bound to the configured database."""
    from dealscout.db.session import async_session_factory, engine

    return DealStore(async_session_factory, engine=engine)
