from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.models import User
from daybook.services.users import ProxyIdentity, UserService


@pytest.mark.asyncio
async def test_resolve_creates_user_once_per_subject(session: AsyncSession) -> None:
    service = UserService(session)

    first = await service.resolve(ProxyIdentity(subject="linus", email="linus@example.com", name="Linus"))
    again = await service.resolve(ProxyIdentity(subject="linus"))

    assert again.id == first.id
    assert first.display_name == "Linus"
    assert again.email == "linus@example.com"
    count = await session.execute(select(func.count(User.id)))
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_resolve_refreshes_changed_email(session: AsyncSession) -> None:
    service = UserService(session)
    await service.resolve(ProxyIdentity(subject="linus", email="old@example.com"))

    user = await service.resolve(ProxyIdentity(subject="linus", email="new@example.com"))

    assert user.email == "new@example.com"


@pytest.mark.asyncio
async def test_resolve_rejects_blank_subject(session: AsyncSession) -> None:
    with pytest.raises(ValueError):
        await UserService(session).resolve(ProxyIdentity(subject="   "))
