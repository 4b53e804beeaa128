# sweetshop/services/sweet_service.py
import logging
import uuid

from sqlmodel import Session

from sweetshop.core.errors import NotFound, OutOfStock, ValidationError
from sweetshop.models.sweet import MAX_QUANTITY, Sweet
from sweetshop.repositories.sweet_repo import SweetRepository
from sweetshop.schemas.sweet import SweetCreate, SweetFilter, SweetUpdate

logger = logging.getLogger(__name__)


class SweetService:
    """
    Business logic for the sweet inventory.

    Responsibilities:
      - CRUD + search over sweets
      - derived category list
      - purchase / restock as atomic stock updates
      - explicit not-found checks (no silent no-op updates)

    Role checks are applied at the router via the access gate.
    """

    def __init__(self, repo: SweetRepository):
        self.repo = repo

    # ----- Reads -----

    def list_sweets(self, session: Session) -> list[Sweet]:
        return self.repo.list_all(session)

    def search_sweets(self, session: Session, filters: SweetFilter) -> list[Sweet]:
        """
        Conjunctive search. With no criteria this is the same as listing.
        """
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise ValidationError("minPrice cannot be greater than maxPrice")
        return self.repo.search(session, filters)

    def get_sweet(self, session: Session, sweet_id: uuid.UUID) -> Sweet:
        sweet = self.repo.get_by_id(session, sweet_id)
        if not sweet:
            raise NotFound("Sweet not found")
        return sweet

    def list_categories(self, session: Session) -> list[str]:
        return self.repo.list_categories(session)

    # ----- Writes -----

    def create_sweet(self, session: Session, payload: SweetCreate) -> Sweet:
        sweet = Sweet(
            name=payload.name,
            category=payload.category,
            price=payload.price,
            quantity=payload.quantity,
        )
        sweet = self.repo.create(session, sweet)
        logger.info("Created sweet %s (%s)", sweet.id, sweet.name)
        return sweet

    def update_sweet(
        self,
        session: Session,
        sweet_id: uuid.UUID,
        payload: SweetUpdate,
    ) -> Sweet:
        """
        Partial update: only fields present in the payload are applied.
        """
        sweet = self.get_sweet(session, sweet_id)

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(sweet, field, value)

        sweet = self.repo.update(session, sweet)
        logger.info("Updated sweet %s fields=%s", sweet.id, sorted(changes))
        return sweet

    def delete_sweet(self, session: Session, sweet_id: uuid.UUID) -> None:
        sweet = self.get_sweet(session, sweet_id)
        self.repo.delete(session, sweet)
        logger.info("Deleted sweet %s", sweet_id)

    # ----- Stock -----

    def purchase(self, session: Session, sweet_id: uuid.UUID) -> Sweet:
        """
        Take one unit out of stock.

        The decrement is a single conditional UPDATE; if it matches no
        row we look the sweet up only to pick the right error.

        Raises:
            NotFound(404): unknown id.
            OutOfStock(400): quantity is 0, nothing changed.
        """
        if not self.repo.decrement_if_in_stock(session, sweet_id):
            self.get_sweet(session, sweet_id)
            logger.info("Purchase rejected, sweet %s out of stock", sweet_id)
            raise OutOfStock()

        sweet = self.get_sweet(session, sweet_id)
        logger.info("Purchased sweet %s, %d left", sweet_id, sweet.quantity)
        return sweet

    def restock(self, session: Session, sweet_id: uuid.UUID, amount: int = 1) -> Sweet:
        """
        Add `amount` units to stock (default 1).

        Raises:
            ValidationError(400): amount is not a positive integer, or the
                new quantity would exceed MAX_QUANTITY.
            NotFound(404): unknown id.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("amount must be a positive integer")
        if amount > MAX_QUANTITY:
            raise ValidationError(f"amount cannot exceed {MAX_QUANTITY}")

        if not self.repo.increment(session, sweet_id, amount):
            self.get_sweet(session, sweet_id)
            raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY}")

        sweet = self.get_sweet(session, sweet_id)
        logger.info("Restocked sweet %s by %d, now %d", sweet_id, amount, sweet.quantity)
        return sweet
