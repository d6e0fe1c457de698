"""Service logic for finding two-way skill matches between profiles."""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Set

from skillbarter.schemas.profile import Profile
from skillbarter.schemas.skill import Skill

logger = logging.getLogger(__name__)


def skill_names(skills: Iterable[Skill]) -> Set[str]:
    """Lower-cased skill names. Whitespace and punctuation are left alone."""
    return {skill.name.lower() for skill in skills}


def _overlaps(skills: Iterable[Skill], names: Set[str]) -> bool:
    return any(skill.name.lower() in names for skill in skills)


def is_match(me: Profile, candidate: Profile) -> bool:
    """
    True when ``candidate`` offers something ``me`` wants AND wants
    something ``me`` offers. A one-way overlap does not count.
    """
    if candidate.id == me.id or not candidate.profile_completed:
        return False

    wanted = skill_names(me.skills_wanted)
    offered = skill_names(me.skills_offered)

    # Candidate offers a skill I want
    they_teach_me = _overlaps(candidate.skills_offered, wanted)
    # Candidate wants a skill I offer
    they_learn_from_me = _overlaps(candidate.skills_wanted, offered)

    return they_teach_me and they_learn_from_me


def find_matches(me: Profile, candidates: Iterable[Profile]) -> List[Profile]:
    """
    Return every candidate forming a bidirectional skill match with ``me``,
    in input order.

    An incomplete ``me`` yields no matches rather than an error; callers are
    expected to have gated on completion already.
    """
    if not me.profile_completed:
        logger.debug("Skipping match search for incomplete profile %s", me.id)
        return []

    if not me.skills_wanted or not me.skills_offered:
        return []

    return [candidate for candidate in candidates if is_match(me, candidate)]


def _mentions(profile: Profile, query: str) -> bool:
    needle = query.lower()
    if needle in (profile.name or "").lower():
        return True
    return any(
        needle in skill.name.lower()
        for skill in (*profile.skills_offered, *profile.skills_wanted)
    )


def _has_category(profile: Profile, category: str) -> bool:
    # Both lists are scanned: a category shows up whichever side it is on.
    return any(
        skill.category == category
        for skill in (*profile.skills_offered, *profile.skills_wanted)
    )


def filter_matches(
    matches: Iterable[Profile],
    query: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Profile]:
    """
    Narrow an already computed match list.

    ``query`` keeps matches whose name or any skill name contains it
    (case-insensitive); ``category`` keeps matches with at least one skill in
    that category. Empty values pass everything.
    """
    result = []
    for match in matches:
        if query and not _mentions(match, query):
            continue
        if category and not _has_category(match, category):
            continue
        result.append(match)
    return result


def shared_skills(me: Profile, match: Profile) -> Dict[str, List[Skill]]:
    """The skills that make ``match`` a match, for highlighting on its card."""
    wanted = skill_names(me.skills_wanted)
    offered = skill_names(me.skills_offered)
    return {
        "they_offer": [s for s in match.skills_offered if s.name.lower() in wanted],
        "they_want": [s for s in match.skills_wanted if s.name.lower() in offered],
    }


def popular_skills(
    profiles: Iterable[Profile], exclude_id: Optional[int] = None, limit: int = 5
) -> List[str]:
    """
    Most frequently offered skill names among other users, most common first.

    Counts exact names; ties keep the order in which names were first seen.
    """
    counts: Counter = Counter()
    for profile in profiles:
        if profile.id == exclude_id:
            continue
        counts.update(skill.name for skill in profile.skills_offered if skill.name)
    return [name for name, _ in counts.most_common(limit)]
