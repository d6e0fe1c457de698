"""Tests for the match board refresh policy."""

import asyncio

import pytest

from skillbarter.services.match_board import MatchBoard
from skillbarter.services.profiles import ProfileStoreError


def _loader(value):
    async def load():
        return value
    return load


def _failing_loader():
    async def load():
        raise ProfileStoreError("store unavailable")
    return load


@pytest.fixture
def me(make_profile):
    return make_profile(1, offers=["JavaScript"], wants=["Spanish"])


@pytest.fixture
def partner(make_profile):
    return make_profile(2, offers=["Spanish"], wants=["JavaScript"], name="Ana")


@pytest.mark.asyncio
async def test_refresh_publishes_matches(me, partner, make_profile):
    board = MatchBoard()
    stranger = make_profile(3, offers=["Drums"], wants=["Piano"])

    outcome = await board.refresh(1, _loader(me), _loader([me, partner, stranger]))

    assert outcome.published is True
    assert outcome.error is None
    assert outcome.matches == [partner]
    assert board.current(1) == [partner]


@pytest.mark.asyncio
async def test_failed_roster_fetch_keeps_previous_result(me, partner):
    board = MatchBoard()
    await board.refresh(1, _loader(me), _loader([partner]))

    outcome = await board.refresh(1, _loader(me), _failing_loader())

    assert outcome.error == "Failed to load matches"
    assert outcome.published is False
    assert outcome.matches == [partner]


@pytest.mark.asyncio
async def test_failed_first_fetch_leaves_empty_result(me):
    board = MatchBoard()

    outcome = await board.refresh(1, _failing_loader(), _loader([]))

    assert outcome.error
    assert outcome.matches == []


@pytest.mark.asyncio
async def test_incomplete_self_skips_matching(make_profile, partner):
    board = MatchBoard()
    newcomer = make_profile(1, offers=["JavaScript"], wants=["Spanish"], completed=False)

    outcome = await board.refresh(1, _loader(newcomer), _loader([partner]))

    assert outcome.published is False
    assert outcome.matches == []


@pytest.mark.asyncio
async def test_overlapping_refreshes_keep_the_latest_request(me, make_profile):
    board = MatchBoard()
    old_partner = make_profile(2, offers=["Spanish"], wants=["JavaScript"])
    new_partner = make_profile(3, offers=["Spanish"], wants=["JavaScript"])
    release = asyncio.Event()

    async def slow_roster():
        await release.wait()
        return [old_partner]

    first = asyncio.create_task(board.refresh(1, _loader(me), slow_roster))
    await asyncio.sleep(0)  # first refresh takes its ticket and blocks

    second = await board.refresh(1, _loader(me), _loader([new_partner]))
    release.set()
    first_outcome = await first

    assert second.published is True
    assert first_outcome.published is False
    assert board.current(1) == [new_partner]


def test_publish_rejects_stale_ticket(partner):
    board = MatchBoard()
    stale = board.begin(1)
    fresh = board.begin(1)

    assert board.publish(1, stale, [partner]) is False
    assert board.current(1) == []
    assert board.publish(1, fresh, [partner]) is True
    assert board.current(1) == [partner]


def test_tickets_are_per_account(partner):
    board = MatchBoard()
    mine = board.begin(1)
    board.begin(2)

    assert board.publish(1, mine, [partner]) is True


def test_forget_and_clear(partner):
    board = MatchBoard()
    board.publish(1, board.begin(1), [partner])
    board.publish(2, board.begin(2), [partner])

    board.forget(1)
    assert board.current(1) == []
    assert board.current(2) == [partner]

    board.clear()
    assert board.current(2) == []
