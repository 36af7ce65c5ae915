"""
Unit tests for the table-level data access of the cleanup engine.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from scims.database import generate_id
from scims.models import Business, Store
from scims.services.purge_store import PurgeStore


@pytest.fixture
def businesses(session):
    ids = [generate_id() for _ in range(5)]
    session.add_all([Business(id=business_id, name=f'Business {n}') for n, business_id in enumerate(ids)])
    session.commit()
    return ids


class TestFetch:

    def test_returns_requested_columns(self, session, businesses):
        rows = PurgeStore(session).fetch('business', ['id', 'name'])

        assert len(rows) == 5
        assert set(rows[0]) == {'id', 'name'}

    def test_where_in_restricts_rows(self, session, businesses):
        rows = PurgeStore(session).fetch('business', ['id'], where_in={'id': businesses[:2]})

        assert {row['id'] for row in rows} == set(businesses[:2])

    def test_empty_where_in_returns_nothing(self, session, businesses):
        assert PurgeStore(session).fetch('business', ['id'], where_in={'id': []}) == []

    def test_unknown_table(self, session):
        with pytest.raises(ValueError):
            PurgeStore(session).fetch('no_such_table', ['id'])


class TestDeleteIds:

    def test_deletes_in_batches(self, session, businesses):
        store = PurgeStore(session, batch_size=2)

        assert store.delete_ids('business', businesses[:4]) == 4
        assert session.query(Business).count() == 1

    def test_failure_rolls_back_every_batch(self, session, businesses):
        session.add(Store(id=generate_id(), business_id=businesses[3], name='Pinned'))
        session.commit()
        store = PurgeStore(session, batch_size=2)

        with pytest.raises(IntegrityError):
            store.delete_ids('business', businesses)

        # Session is usable again and nothing was removed
        assert session.query(Business).count() == 5

    def test_reports_submitted_ids(self, session, businesses):
        missing = generate_id()

        assert PurgeStore(session).delete_ids('business', [businesses[0], missing]) == 2
