"""Database operations for owner profiles and their professional records."""

from cardclone.core.schemas_chat import Experience, OwnerProfile, Project
from cardclone.db.records import parse_row, parse_rows, quote_filter_value
from cardclone.db.supabase_client import get_supabase


def get_owner(owner_id: str) -> OwnerProfile | None:
    """
    Get an owner profile by owner_id.

    Args:
        owner_id: Owner identifier

    Returns:
        OwnerProfile, or None if absent or malformed

    Raises:
        Exception: If the database call fails
    """
    supabase = get_supabase()
    response = (
        supabase.table("owners")
        .select("*")
        .eq("owner_id", owner_id)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    return parse_row(OwnerProfile, rows[0], "owners") if rows else None


def list_owner_names_ending_with(suffix: str) -> list[str]:
    """List owner names that end with ``suffix`` (case-insensitive)."""
    supabase = get_supabase()
    response = (
        supabase.table("owners")
        .select("name")
        .ilike("name", f"%{suffix}")
        .execute()
    )
    return [row["name"] for row in response.data or [] if row.get("name")]


def find_owner_by_name(name: str) -> OwnerProfile | None:
    """
    Find one owner whose name contains ``name``.

    A trailing "이" is also tried stripped so inflected forms such as
    "재권이" still match "이재권".

    Args:
        name: Full or partial person name

    Returns:
        First matching OwnerProfile, or None

    Raises:
        Exception: If the database call fails
    """
    stripped = name[:-1] if name.endswith("이") and len(name) > 1 else name
    conditions = ",".join(
        f"name.ilike.{quote_filter_value(f'%{candidate}%')}"
        for candidate in dict.fromkeys([name, stripped])
    )

    supabase = get_supabase()
    response = supabase.table("owners").select("*").or_(conditions).limit(1).execute()
    rows = response.data or []
    return parse_row(OwnerProfile, rows[0], "owners") if rows else None


def list_projects(owner_id: str) -> list[Project]:
    """List projects belonging to an owner."""
    supabase = get_supabase()
    response = supabase.table("projects").select("*").eq("owner_id", owner_id).execute()
    return parse_rows(Project, response.data, "projects")


def list_experiences(owner_id: str) -> list[Experience]:
    """List work experiences belonging to an owner."""
    supabase = get_supabase()
    response = supabase.table("experiences").select("*").eq("owner_id", owner_id).execute()
    return parse_rows(Experience, response.data, "experiences")
