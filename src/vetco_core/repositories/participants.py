"""Lookup of users and veterinarians by participant identity."""

from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Participant, User, Veterinarian
from ..schemas.message import ParticipantProfile

Account = Union[User, Veterinarian]


class ParticipantRepository:
    """Resolves a ``Participant`` to the user or veterinarian row behind it."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _model_for(participant: Participant):
        return Veterinarian if participant.is_veterinarian else User

    async def get(self, participant: Participant) -> Optional[Account]:
        model = self._model_for(participant)
        result = await self.session.execute(
            select(model).where(model.id == participant.id)
        )
        return result.scalar_one_or_none()

    async def exists(self, participant: Participant) -> bool:
        model = self._model_for(participant)
        result = await self.session.execute(
            select(model.id).where(model.id == participant.id)
        )
        return result.scalar_one_or_none() is not None

    async def get_profile(self, participant: Participant) -> Optional[ParticipantProfile]:
        """Display fields for a conversation partner, or None if unknown."""
        account = await self.get(participant)
        if account is None:
            return None
        return ParticipantProfile(
            id=account.id,
            type=participant.kind,
            first_name=account.first_name,
            last_name=account.last_name,
            email=account.email,
            clinic=getattr(account, "clinic", None),
        )
