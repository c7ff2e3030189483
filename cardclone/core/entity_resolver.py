"""Mentioned-person resolution: find another profile named in a chat message.

Name candidates come from an ordered list of matchers (first hit wins):
  1. A standalone 2-4 syllable Hangul word, optionally with an honorific
     (님/씨/대표님) and/or a particle attached ("재권님", "이재권은")
  2. A standalone 2-3 syllable name inflected with "이" ("재권이한테")
  3. Any 2-3 syllable Hangul run

At most one trailing particle is removed per candidate: either the one the
matcher consumed, or else one stripped from the captured name. A name whose
last syllable is itself a particle ("김지은") therefore keeps it whenever a
particle follows ("김지은은" -> "김지은").

A 2-syllable candidate is treated as a given name without surname and is
expanded to the shortest stored full name ending with it. The resolved name
is then looked up with a contains match. Every failure degrades to "no
person"; the chat pipeline never fails because of this module.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Protocol

from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import MentionedPerson
from cardclone.db.owners import (
    find_owner_by_name,
    list_experiences,
    list_owner_names_ending_with,
    list_projects,
)

logger = get_logger(__name__)

PARTICLES = frozenset("은는이가을를의")

REPRESENTATIVE_HONORIFIC = "대표님"
DEFAULT_HONORIFIC = "님"


@dataclass(frozen=True)
class NameMatch:
    """Raw name plus the particle the matcher consumed after it, if any."""

    name: str
    particle: str = ""


class NameMatcher(Protocol):
    """Strategy that pulls a raw name candidate out of a message."""

    def match(self, message: str) -> NameMatch | None: ...


@dataclass(frozen=True)
class RegexNameMatcher:
    """Matcher whose first capture group is the name.

    An optional ``particle`` named group records a particle already
    consumed by the pattern.
    """

    label: str
    pattern: re.Pattern[str]

    def match(self, message: str) -> NameMatch | None:
        found = self.pattern.search(message)
        if not found:
            return None
        return NameMatch(name=found.group(1), particle=found.groupdict().get("particle") or "")


NAME_MATCHERS: tuple[NameMatcher, ...] = (
    RegexNameMatcher(
        "name_with_honorific",
        re.compile(
            r"(?<![가-힣])([가-힣]{2,4}?)(?:대표님|님|씨)?(?P<particle>[은는이가을를의]?)(?![가-힣])"
        ),
    ),
    RegexNameMatcher(
        "given_name_with_i",
        re.compile(r"(?<![가-힣])([가-힣]{2,3})(?P<particle>이)(?:가|는|께|야|님|씨|대표님)?"),
    ),
    RegexNameMatcher("bare_name", re.compile(r"([가-힣]{2,3})")),
)


def strip_particle(name: str) -> str:
    """Drop one trailing grammatical particle, if present."""
    if name and name[-1] in PARTICLES:
        return name[:-1]
    return name


def extract_name_candidate(
    message: str,
    matchers: tuple[NameMatcher, ...] = NAME_MATCHERS,
) -> str | None:
    """
    Extract the most likely person name from a message.

    Args:
        message: User message text
        matchers: Strategies in priority order

    Returns:
        Name candidate with at most one trailing particle removed, or None
    """
    for matcher in matchers:
        found = matcher.match(message)
        if not found or not found.name:
            continue
        name = found.name if found.particle else strip_particle(found.name)
        # A single syllable would contains-match almost every profile
        if len(name) < 2:
            return None
        return name
    return None


def resolve_full_name(partial: str) -> str:
    """
    Expand a 2-syllable given name to a stored full name.

    Prefers the shortest matching name. Returns ``partial`` unchanged when it
    is not 2 syllables, nothing matches, or the lookup fails.
    """
    if len(partial) != 2:
        return partial

    try:
        names = list_owner_names_ending_with(partial)
    except Exception as e:
        logger.warning(f"Full name lookup failed for '{partial}': {e}")
        return partial

    if not names:
        return partial
    # min() keeps the first of equally short names
    return min(names, key=len)


def honorific_for(name: str, representative: str) -> str:
    """Honorific used when the clone refers to ``name``."""
    return REPRESENTATIVE_HONORIFIC if name == representative else DEFAULT_HONORIFIC


async def resolve_mentioned_person(
    message: str,
    primary_owner_id: str,
    representative: str,
) -> MentionedPerson | None:
    """
    Resolve a person other than the primary owner mentioned in a message.

    Args:
        message: Latest user message
        primary_owner_id: owner_id of the persona's own profile
        representative: Name addressed with the representative honorific

    Returns:
        MentionedPerson with records and honorific, or None
    """
    candidate = extract_name_candidate(message)
    if not candidate:
        return None

    try:
        name = await asyncio.to_thread(resolve_full_name, candidate)
        owner = await asyncio.to_thread(find_owner_by_name, name)
        if owner is None:
            logger.debug(f"No owner found with name: {name}")
            return None
        if owner.owner_id == primary_owner_id:
            return None

        projects, experiences = await asyncio.gather(
            asyncio.to_thread(list_projects, owner.owner_id),
            asyncio.to_thread(list_experiences, owner.owner_id),
            return_exceptions=True,
        )
        for result in (projects, experiences):
            if isinstance(result, BaseException):
                raise result

    except Exception:
        logger.exception(f"Person resolution failed for candidate '{candidate}'")
        return None

    logger.info(f"Resolved mentioned person '{candidate}' -> '{owner.name}'")
    return MentionedPerson(
        name=name,
        owner=owner,
        honorific=honorific_for(owner.name, representative),
        projects=projects,
        experiences=experiences,
    )
