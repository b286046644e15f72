"""Device push token storage."""

import logging
import uuid
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import PushToken

logger = logging.getLogger(__name__)


class PushTokenRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(self, user_id: uuid.UUID) -> List[PushToken]:
        result = await self.session.execute(
            select(PushToken).where(PushToken.user_id == user_id)
        )
        return list(result.scalars().all())

    async def register(self, user_id: uuid.UUID, token: str, platform: str) -> PushToken:
        """
        Store a device token, moving it to ``user_id`` if it is already known.

        A device that logs in as a different user keeps a single row.
        """
        result = await self.session.execute(
            select(PushToken).where(PushToken.token == token)
        )
        push_token = result.scalar_one_or_none()

        if push_token is None:
            push_token = PushToken(user_id=user_id, token=token, platform=platform)
            self.session.add(push_token)
        else:
            push_token.user_id = user_id
            push_token.platform = platform

        await self.session.flush()
        logger.info(f"Registered push token for user {user_id} on {platform}")
        return push_token

    async def delete_tokens(self, tokens: Iterable[str]) -> int:
        """Remove the given tokens; returns how many rows were deleted."""
        token_list = list(tokens)
        if not token_list:
            return 0

        result = await self.session.execute(
            select(PushToken).where(PushToken.token.in_(token_list))
        )
        stale = result.scalars().all()
        for push_token in stale:
            await self.session.delete(push_token)

        await self.session.flush()
        logger.info(f"Removed {len(stale)} invalid push token(s)")
        return len(stale)
