"""
Match board — per-account match results and the policy for refreshing them.

Every refresh takes a ticket. Only the newest ticket for an account may
publish, so when two refreshes overlap the one started last wins, however
the loads happen to finish.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from skillbarter.schemas.profile import Profile
from skillbarter.services.matching import find_matches
from skillbarter.services.profiles import ProfileStoreError

logger = logging.getLogger(__name__)

ProfileLoader = Callable[[], Awaitable[Optional[Profile]]]
RosterLoader = Callable[[], Awaitable[List[Profile]]]


@dataclass
class MatchRefresh:
    """Outcome of one refresh cycle."""
    matches: List[Profile] = field(default_factory=list)
    error: Optional[str] = None
    published: bool = False


class MatchBoard:
    """In-memory match results keyed by account id."""

    def __init__(self) -> None:
        self._tickets = itertools.count(1)
        self._latest: Dict[int, int] = {}
        self._results: Dict[int, List[Profile]] = {}

    def begin(self, account_id: int) -> int:
        """Issue a ticket for a new refresh of ``account_id``."""
        ticket = next(self._tickets)
        self._latest[account_id] = ticket
        return ticket

    def is_current(self, account_id: int, ticket: int) -> bool:
        return self._latest.get(account_id) == ticket

    def publish(self, account_id: int, ticket: int, matches: List[Profile]) -> bool:
        """Store ``matches`` unless a newer refresh has started since ``ticket``."""
        if not self.is_current(account_id, ticket):
            logger.debug("Discarding stale match result %s for account %s", ticket, account_id)
            return False
        self._results[account_id] = list(matches)
        return True

    def current(self, account_id: int) -> List[Profile]:
        return list(self._results.get(account_id, []))

    async def refresh(
        self,
        account_id: int,
        load_me: ProfileLoader,
        load_roster: RosterLoader,
    ) -> MatchRefresh:
        """
        Load the account's profile and the roster, recompute, and publish.

        A store failure keeps the previous result and reports an error
        message instead of raising.
        """
        ticket = self.begin(account_id)
        try:
            me = await load_me()
            if me is None or not me.profile_completed:
                return MatchRefresh(matches=self.current(account_id))
            roster = await load_roster()
        except ProfileStoreError as e:
            logger.error("Match refresh failed for account %s: %s", account_id, e)
            return MatchRefresh(matches=self.current(account_id), error="Failed to load matches")

        published = self.publish(account_id, ticket, find_matches(me, roster))
        return MatchRefresh(matches=self.current(account_id), published=published)

    def forget(self, account_id: int) -> None:
        self._latest.pop(account_id, None)
        self._results.pop(account_id, None)

    def clear(self) -> None:
        self._latest.clear()
        self._results.clear()
