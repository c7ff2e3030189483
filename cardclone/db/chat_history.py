"""Database operations for persisted conversation turns."""

from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import ConversationTurn, Role
from cardclone.db.records import parse_rows
from cardclone.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_turns(owner_id: str) -> list[ConversationTurn]:
    """
    List conversation turns for an owner, oldest first.

    Args:
        owner_id: Owner identifier

    Returns:
        Turns ordered by created_at ascending

    Raises:
        Exception: If the database call fails
    """
    supabase = get_supabase()
    response = (
        supabase.table("chat_history")
        .select("*")
        .eq("owner_id", owner_id)
        .order("created_at", desc=False)
        .execute()
    )
    return parse_rows(ConversationTurn, response.data, "chat_history")


def append_turn(owner_id: str, role: Role, content: str) -> None:
    """
    Append one conversation turn.

    Args:
        owner_id: Owner identifier
        role: user, assistant or system
        content: Message text

    Raises:
        Exception: If the database call fails
    """
    supabase = get_supabase()
    supabase.table("chat_history").insert(
        {"role": role, "content": content, "owner_id": owner_id}
    ).execute()
    logger.debug(f"Stored {role} turn", extra={"owner_id": owner_id})
