"""
Table-level data access used by the database cleanup engine.

The cleanup engine addresses tables by name (it is driven by a declarative
step list), so this adapter works on SQLAlchemy Core tables looked up in
the shared metadata rather than on ORM classes.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, select

from scims.database import Base

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


class PurgeStore:
    """Fetch/delete primitives over one SQLAlchemy session."""

    def __init__(self, session, batch_size: int = DEFAULT_BATCH_SIZE, metadata=None):
        self.session = session
        self.batch_size = max(1, int(batch_size))
        self.metadata = metadata if metadata is not None else Base.metadata

    def _table(self, table_name: str):
        try:
            return self.metadata.tables[table_name]
        except KeyError:
            raise ValueError(f'Unknown table: {table_name}')

    def fetch(
        self,
        table_name: str,
        columns: Sequence[str],
        where_in: Optional[Dict[str, Iterable]] = None
    ) -> List[dict]:
        """
        Read the given columns of every row in a table.

        Args:
            table_name: Table to read
            columns: Column names to return for each row
            where_in: Optional {column: values} restriction (column IN values)

        Returns:
            List of dicts keyed by column name
        """
        table = self._table(table_name)
        query = select(*[table.c[name] for name in columns])

        for column, values in (where_in or {}).items():
            values = list(values)
            if not values:
                return []
            query = query.where(table.c[column].in_(values))

        try:
            rows = self.session.execute(query).all()
        except Exception:
            # Leave the session usable for the next step
            self.session.rollback()
            raise
        return [dict(row._mapping) for row in rows]

    def delete_ids(self, table_name: str, ids: Sequence, column: str = 'id') -> int:
        """
        Delete rows whose `column` value is in `ids`, in batches.

        All batches run in one transaction: it is committed when every batch
        succeeds and rolled back (then re-raised) otherwise.

        Returns:
            Number of identifiers submitted for deletion
        """
        table = self._table(table_name)
        ids = list(ids)

        try:
            for start in range(0, len(ids), self.batch_size):
                batch = ids[start:start + self.batch_size]
                self.session.execute(delete(table).where(table.c[column].in_(batch)))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.debug(f"Deleted {len(ids)} rows from {table_name}")
        return len(ids)
