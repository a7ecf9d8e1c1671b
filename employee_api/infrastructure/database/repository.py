"""Generic repository providing async CRUD operations for SQLAlchemy models."""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.infrastructure.database.base import BaseModel

DEFAULT_PAGINATION_LIMIT = 100


class BaseRepository[T: BaseModel]:
    """Base repository class providing common CRUD operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class EmployeeRepository(BaseRepository[Employee]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Employee)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj: T) -> T:
        """Persist a new instance and return it with server-generated values.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )
        return obj

    async def update(self, entity_id: int, data: Mapping[str, object]) -> T | None:
        """Update a model instance by its ID with partial data.

        Args:
            entity_id: The primary key ID of the model to update.
            data: Field values to apply. Unknown fields are skipped with a warning.

        Returns:
            T | None: The updated model instance if found, None otherwise.
        """
        instance = await self.get_by_id(entity_id)
        if instance is None:
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        await self.session.flush()
        await self.session.refresh(instance)

        logger.info(
            "Updated {} instance ID {} - fields: {}",
            self.model_class.__name__,
            entity_id,
            list(data.keys()),
        )
        return instance

    async def delete(self, entity_id: int) -> bool:
        """Delete a model instance by its ID.

        Returns:
            bool: True if the instance was deleted, False if not found.
        """
        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        deleted = result.rowcount > 0

        if deleted:
            logger.info(
                "Deleted {} instance with ID: {}", self.model_class.__name__, entity_id
            )
        return deleted

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Return the first instance (lowest ID) matching all given values."""
        stmt = select(self.model_class)
        for field, value in kwargs.items():
            if hasattr(self.model_class, field):
                stmt = stmt.where(getattr(self.model_class, field) == value)

        stmt = stmt.order_by(self.model_class.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
