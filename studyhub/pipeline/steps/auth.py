import asyncio
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.pipeline.errors import AuthenticationError

logger = logging.getLogger(__name__)


async def authenticate_user(user_info: dict | None) -> dict:
    """
    Resolve the verified Clerk identity to the local User row.

    Args:
        user_info: Output of verify_clerk_token (clerk_user_id, email, name)

    Returns:
        {"id", "email", "name"} of the User row

    Raises:
        AuthenticationError: If there is no identity or no matching user
    """
    clerk_user_id = (user_info or {}).get("clerk_user_id")
    if not clerk_user_id:
        raise AuthenticationError("Unauthorized: no authenticated user")

    supabase = get_supabase_client()
    response = await asyncio.to_thread(
        lambda: supabase.table("User").select("id, email, name").eq("clerk_user_id", clerk_user_id).execute()
    )

    if not response.data:
        raise AuthenticationError(f"Unauthorized: user {clerk_user_id} is not registered")

    user = response.data[0]
    logger.info(f"🔐 Authenticated user_id={user['id']}")

    return {
        "id": user["id"],
        "email": user.get("email") or user_info.get("email"),
        "name": user.get("name") or user_info.get("name"),
    }
