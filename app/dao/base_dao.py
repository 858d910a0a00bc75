from typing import Any, Generic, TypeVar, Type, Optional
from sqlmodel import SQLModel, select
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseDAO(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model
        self.pk_column = inspect(model).primary_key[0]

    def _identity(self, db_obj: ModelType) -> Any:
        return getattr(db_obj, self.pk_column.key)

    async def create(self, db: AsyncSession, *, obj_in: dict) -> ModelType:
        try:
            db_obj = self.model(**obj_in)
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
            logger.info(f"Created {self.model.__name__}", id=str(self._identity(db_obj)))
            return db_obj
        except Exception as e:
            await db.rollback()
            logger.error(f"Error creating {self.model.__name__}", error=str(e))
            raise

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        try:
            result = await db.execute(select(self.model).where(self.pk_column == id))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} by id", id=str(id), error=str(e))
            raise

    async def exists(self, db: AsyncSession, id: Any) -> bool:
        try:
            result = await db.execute(select(self.pk_column).where(self.pk_column == id))
            return result.first() is not None
        except Exception as e:
            logger.error(f"Error checking {self.model.__name__} existence", id=str(id), error=str(e))
            raise

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        try:
            obj = await self.get_by_id(db, id)
            if obj:
                await db.delete(obj)
                await db.commit()
                logger.info(f"Deleted {self.model.__name__}", id=str(id))
            return obj
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting {self.model.__name__}", id=str(id), error=str(e))
            raise
