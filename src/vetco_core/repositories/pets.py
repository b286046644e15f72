"""Pet queries."""

import uuid
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Pet


class PetRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, pet_id: uuid.UUID) -> Optional[Pet]:
        result = await self.session.execute(select(Pet).where(Pet.id == pet_id))
        return result.scalar_one_or_none()

    async def get_owned(self, pet_id: uuid.UUID, owner_id: uuid.UUID) -> Optional[Pet]:
        """The pet, only if it belongs to ``owner_id``."""
        result = await self.session.execute(
            select(Pet).where(Pet.id == pet_id, Pet.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[Pet]:
        """The owner's pets, most recently added first."""
        result = await self.session.execute(
            select(Pet)
            .where(Pet.owner_id == owner_id)
            .order_by(Pet.created_at.desc(), Pet.id)
        )
        return list(result.scalars().all())

    async def create(self, owner_id: uuid.UUID, **fields: Any) -> Pet:
        pet = Pet(owner_id=owner_id, **fields)
        self.session.add(pet)
        await self.session.flush()
        await self.session.refresh(pet)
        return pet

    async def update(self, pet: Pet, **fields: Any) -> Pet:
        pet.update_fields(**fields)
        await self.session.flush()
        await self.session.refresh(pet)
        return pet

    async def delete(self, pet: Pet) -> None:
        await self.session.delete(pet)
        await self.session.flush()
