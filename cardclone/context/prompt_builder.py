"""System prompt assembly for the owner's chat clone."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from cardclone.context.prompt_blocks import (
    BLOCK_COMPANY,
    BLOCK_ETIQUETTE,
    BLOCK_OWNER,
    BLOCK_PERSONA,
    BLOCK_PRIVATE_REFERENCE,
    BLOCK_REFERENCE,
)
from cardclone.core.schemas_chat import Experience, MentionedPerson, OwnerProfile, Project


def format_current_time(now: datetime) -> str:
    """Render a timestamp the way Korean locale clocks read ("2025. 3. 7. 오후 2:05:09")."""
    meridiem = "오전" if now.hour < 12 else "오후"
    hour = now.hour % 12 or 12
    return (
        f"{now.year}. {now.month}. {now.day}. "
        f"{meridiem} {hour}:{now.minute:02d}:{now.second:02d}"
    )


def format_owner_info(owner: OwnerProfile) -> str:
    """Profile fields of the primary owner, one per line."""
    return "\n".join(
        [
            f"이름: {owner.name}",
            f"나이: {owner.age if owner.age is not None else ''}",
            f"취미: {', '.join(owner.hobbies)}",
            f"가치관: {owner.values}",
            f"나라: {owner.country or ''}",
            f"생년월일: {owner.birth or ''}",
            f"owner_id: {owner.owner_id}",
        ]
    )


def format_mentioned_info(owner: OwnerProfile, honorific: str) -> str:
    """Profile fields of a mentioned person; optional fields only when set."""
    lines = [
        f"이름: {owner.name}{honorific}",
        f"나이: {owner.age if owner.age is not None else ''}",
        f"취미: {', '.join(owner.hobbies)}",
        f"가치관: {owner.values}",
    ]
    if owner.country:
        lines.append(f"나라: {owner.country}")
    if owner.birth:
        lines.append(f"생년월일: {owner.birth}")
    return "\n".join(lines)


def format_experiences(experiences: list[Experience]) -> str:
    return "\n".join(
        f"- {e.company}의 {e.position} ({e.period})\n  {e.description}" for e in experiences
    )


def format_projects(projects: list[Project]) -> str:
    return "\n".join(
        f"- {p.title}: {p.description} (기술 스택: {', '.join(p.tech_stack)})" for p in projects
    )


def build_private_reference(person: MentionedPerson) -> str:
    """Delimited block about a mentioned person, for follow-up questions only."""
    return BLOCK_PRIVATE_REFERENCE.format(
        mentioned_name=person.name,
        honorific=person.honorific,
        owner_info=format_mentioned_info(person.owner, person.honorific),
        experience_info=format_experiences(person.experiences),
        project_info=format_projects(person.projects),
    )


def build_system_prompt(
    owner: OwnerProfile,
    experiences: list[Experience],
    projects: list[Project],
    *,
    persona_name: str,
    representative: str,
    snippets: str = "",
    mentioned: MentionedPerson | None = None,
    now: datetime | None = None,
    timezone: str = "Asia/Seoul",
) -> str:
    """
    Compose the grounding instruction for one chat request.

    Args:
        owner: Primary owner profile
        experiences: Primary owner's experiences
        projects: Primary owner's projects
        persona_name: Name the clone speaks as
        representative: Company representative's name
        snippets: Retrieved knowledge text ("" to omit the block)
        mentioned: Resolved third party, appended after the primary blocks
        now: Clock override (defaults to the current time in ``timezone``)
        timezone: IANA timezone for the clock line

    Returns:
        Single system prompt string
    """
    if now is None:
        now = datetime.now(ZoneInfo(timezone))

    blocks = [
        BLOCK_PERSONA.format(persona_name=persona_name, current_time=format_current_time(now)),
        BLOCK_COMPANY.format(representative=representative),
        BLOCK_OWNER.format(
            owner_info=format_owner_info(owner),
            experience_info=format_experiences(experiences),
            project_info=format_projects(projects),
        ),
    ]
    if snippets:
        blocks.append(BLOCK_REFERENCE.format(snippets=snippets))
    blocks.append(BLOCK_ETIQUETTE.format(representative=representative))

    if mentioned is not None:
        blocks.append(build_private_reference(mentioned))

    return "\n\n".join(blocks)
