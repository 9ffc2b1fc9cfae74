"""Unit tests for the ShortLinkMemoryDAO

Test coverage includes:

1. Batch insertion and retrieval
   - Ensures stored links come back field-for-field in insertion order.
   - Confirms taken or repeated shortcodes reject the whole batch.

2. Click recording
   - Ensures clicks are appended and counted; unknown shortcodes raise.
   - Ensures concurrent click writers never lose an update.

3. Administration
   - Ensures deactivate() and clear_all() behave as documented.
"""

import threading
from datetime import datetime, timedelta, UTC

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from linkshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from linkshortener.dao.memory import ShortLinkMemoryDAO
from linkshortener.models import ShortLinkModel, ClickRecordModel


CREATED_AT = datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# Fixtures
# -------------------------------


def make_link(shortcode: str, minutes: int = 30) -> ShortLinkModel:
    return ShortLinkModel.create(
        original_url=f'https://example.com/{shortcode}',
        shortcode=shortcode,
        validity_minutes=minutes,
        created_at=CREATED_AT,
    )


@pytest.fixture
def dao():
    return ShortLinkMemoryDAO([make_link('abc123'), make_link('link42')])


# -------------------------------
# 1. Batch insertion and retrieval
# -------------------------------


def test_get_all_preserves_insertion_order(dao):
    new = make_link('zz9')
    dao.save_batch([new])

    assert [link.shortcode for link in dao.get_all()] == ['abc123', 'link42', 'zz9']


def test_load_all_never_skips(dao):
    result = dao.load_all()

    assert [link.shortcode for link in result.links] == ['abc123', 'link42']
    assert result.skipped == ()


def test_get_returns_stored_fields(dao):
    link = make_link('docs', minutes=1)
    dao.save_batch([link])

    assert dao.get('docs') == link


def test_get_not_found(dao):
    with pytest.raises(ShortLinkNotFoundError):
        dao.get('zzzzzz')
    assert dao.find('zzzzzz') is None


def test_save_batch_taken_shortcode_rejects_all(dao):
    with pytest.raises(ShortLinkAlreadyExistsError, match='abc123'):
        dao.save_batch([make_link('fresh1'), make_link('abc123')])

    assert dao.shortcodes() == {'abc123', 'link42'}


def test_save_batch_repeated_shortcode(dao):
    with pytest.raises(ShortLinkAlreadyExistsError):
        dao.save_batch([make_link('twin'), make_link('twin')])

    assert 'twin' not in dao.shortcodes()


def test_save_batch_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.save_batch(['https://example.com'])


def test_empty_store():
    dao = ShortLinkMemoryDAO()
    assert dao.get_all() == []
    assert dao.shortcodes() == set()


# -------------------------------
# 2. Click recording
# -------------------------------


def test_record_click(dao):
    first = ClickRecordModel(timestamp=CREATED_AT + timedelta(minutes=1))
    second = ClickRecordModel(timestamp=CREATED_AT + timedelta(minutes=2), user_agent='curl/8.5.0', referrer='https://a.example')

    assert dao.record_click('abc123', first) == 1
    assert dao.record_click('abc123', second) == 2
    assert dao.get('abc123').clicks == (first, second)
    assert dao.get('link42').clicks == ()


def test_record_click_not_found(dao):
    with pytest.raises(ShortLinkNotFoundError):
        dao.record_click('zzzzzz', ClickRecordModel(timestamp=CREATED_AT))


def test_concurrent_clicks_are_not_lost(dao):
    """Ensure N concurrent writers produce exactly N clicks."""
    workers, per_worker = 8, 50
    click = ClickRecordModel(timestamp=CREATED_AT)

    def hammer():
        for _ in range(per_worker):
            dao.record_click('abc123', click)

    threads = [threading.Thread(target=hammer) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(dao.get('abc123').clicks) == workers * per_worker


# -------------------------------
# 3. Administration
# -------------------------------


def test_deactivate(dao):
    dao.deactivate('abc123')

    assert dao.get('abc123').is_active is False
    assert dao.get('link42').is_active is True


def test_deactivate_not_found(dao):
    with pytest.raises(ShortLinkNotFoundError):
        dao.deactivate('zzzzzz')


def test_clear_all(dao):
    dao.clear_all()

    assert dao.get_all() == []
    assert dao.shortcodes() == set()
