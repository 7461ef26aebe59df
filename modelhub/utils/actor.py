"""Actor identity resolution for audited API calls."""

from typing import Optional

from fastapi import Header

from modelhub.config.settings import settings


async def get_actor(
    x_actor: Optional[str] = Header(default=None, description="Identity recorded in the audit trail"),
) -> str:
    """Return the caller's actor identity, or the system identity if none was sent.

    There is no authentication: the header is trusted as-is.
    """
    if x_actor and x_actor.strip():
        return x_actor.strip()
    return settings.DEFAULT_ACTOR
