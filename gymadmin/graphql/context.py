from dataclasses import dataclass
from strawberry.fastapi import BaseContext
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gymadmin.db.postgresql import get_db


@dataclass
class Context(BaseContext):
    db: AsyncSession
    request: Request
    response: Response


async def build_context(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> Context:
    return Context(db=db, request=request, response=response)
