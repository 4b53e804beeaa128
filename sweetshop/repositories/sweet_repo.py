# sweetshop/repositories/sweet_repo.py
import uuid

from sqlalchemy import func, update
from sqlmodel import Session, select

from sweetshop.models.sweet import MAX_QUANTITY, Sweet
from sweetshop.schemas.sweet import SweetFilter


class SweetRepository:
    """
    Data access layer for Sweet.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - Stock changes are single conditional UPDATE statements so the
      database serializes concurrent purchases/restocks.
    """

    # ----- Reads -----

    def get_by_id(self, session: Session, sweet_id: uuid.UUID) -> Sweet | None:
        return session.get(Sweet, sweet_id)

    def list_all(self, session: Session) -> list[Sweet]:
        stmt = select(Sweet).order_by(Sweet.created_at)
        return list(session.exec(stmt).all())

    def search(self, session: Session, filters: SweetFilter) -> list[Sweet]:
        stmt = select(Sweet)
        if filters.name:
            stmt = stmt.where(
                func.lower(Sweet.name).contains(filters.name.lower(), autoescape=True)
            )
        if filters.category:
            stmt = stmt.where(Sweet.category == filters.category)
        if filters.min_price is not None:
            stmt = stmt.where(Sweet.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Sweet.price <= filters.max_price)
        stmt = stmt.order_by(Sweet.created_at)
        return list(session.exec(stmt).all())

    def list_categories(self, session: Session) -> list[str]:
        stmt = (
            select(Sweet.category)
            .where(Sweet.category != "")
            .distinct()
            .order_by(Sweet.category)
        )
        return list(session.exec(stmt).all())

    # ----- Writes -----

    def create(self, session: Session, sweet: Sweet) -> Sweet:
        session.add(sweet)
        session.commit()
        session.refresh(sweet)
        return sweet

    def update(self, session: Session, sweet: Sweet) -> Sweet:
        session.add(sweet)
        session.commit()
        session.refresh(sweet)
        return sweet

    def delete(self, session: Session, sweet: Sweet) -> None:
        session.delete(sweet)
        session.commit()

    # ----- Stock -----

    def decrement_if_in_stock(self, session: Session, sweet_id: uuid.UUID) -> bool:
        """
        UPDATE sweets SET quantity = quantity - 1
        WHERE id = :id AND quantity > 0

        Returns True if a row was updated.
        """
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity > 0)
            .values(quantity=Sweet.quantity - 1)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        session.commit()
        return result.rowcount == 1

    def increment(self, session: Session, sweet_id: uuid.UUID, amount: int) -> bool:
        """
        UPDATE sweets SET quantity = quantity + :amount
        WHERE id = :id AND quantity <= MAX_QUANTITY - :amount

        Returns True if a row was updated.
        """
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - amount)
            .values(quantity=Sweet.quantity + amount)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        session.commit()
        return result.rowcount == 1
