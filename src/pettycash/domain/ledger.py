"""Ledger domain service.

Read side of the balance transaction log. Entries are appended only by
``BalanceMutator``; nothing here writes.
"""

from datetime import date
from typing import Optional

from pettycash.database.base import Database
from pettycash.domain.entities import LedgerEntry, LedgerFilter, Page, Pool
from pettycash.domain.errors import NotFoundError, ValidationError, entry_not_found

DEFAULT_PAGE_SIZE = 25
PAGE_SIZE_CHOICES = (10, 25, 50, 100, 200, 500)


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """Validate a 1-based page request and return (offset, limit).

    Raises:
        ValidationError: If page or page size is not positive
    """
    if page < 1:
        raise ValidationError("Page number must be 1 or greater")
    if page_size < 1:
        raise ValidationError("Page size must be 1 or greater")
    return (page - 1) * page_size, page_size


class LedgerService:
    """Service for reading ledger entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_entry(self, entry_id: int) -> LedgerEntry:
        """Get ledger entry by ID.

        Raises:
            NotFoundError: If entry doesn't exist
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        user_id: Optional[int] = None,
        pool: Optional[str | Pool] = None,
        on_date: Optional[date] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page[LedgerEntry]:
        """List ledger entries newest first, one page at a time.

        Args:
            user_id: Optional account filter
            pool: Optional pool filter; None or "all" lists every pool
            on_date: Optional calendar day the entry was created on
            search: Optional case-insensitive text matched against the
                description and the actor name
            page: 1-based page number
            page_size: Entries per page

        Returns:
            Page of entries plus the total matching count

        Raises:
            ValidationError: If the pool or paging arguments are invalid
        """
        offset, limit = page_window(page, page_size)
        entry_filter = LedgerFilter(
            user_id=user_id,
            pool=self._parse_pool(pool),
            on_date=on_date,
            search=search.strip() if search and search.strip() else None,
        )
        entries, total = self.db.list_entries(entry_filter, offset=offset, limit=limit)
        return Page(items=entries, total=total, page=page, page_size=page_size)

    @staticmethod
    def _parse_pool(pool: Optional[str | Pool]) -> Optional[Pool]:
        if pool is None or (isinstance(pool, str) and pool.strip().lower() in ("", "all")):
            return None
        try:
            return Pool.parse(pool)
        except ValueError as e:
            raise ValidationError(str(e)) from None
