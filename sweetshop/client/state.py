# sweetshop/client/state.py
"""
Client-side inventory state.

A read-through cache of the last fetched sweet list. It is never
authoritative: every mutation is followed by a full refetch of the
list (full refresh on write, no local patching of the cached rows).
Categories are derived from the cached list.
"""
import logging

from sweetshop.client.api import ApiError, NotAuthenticated, SweetShopApi

logger = logging.getLogger(__name__)

# Sweets with 0 < quantity <= LOW_STOCK_THRESHOLD count as running low.
LOW_STOCK_THRESHOLD = 5


class SweetsState:
    def __init__(self, api: SweetShopApi):
        self.api = api
        self.sweets: list[dict] = []
        self.error: str | None = None

    @property
    def categories(self) -> list[str]:
        return sorted({s["category"] for s in self.sweets if s.get("category")})

    @property
    def low_stock(self) -> list[dict]:
        return [s for s in self.sweets if 0 < s["quantity"] <= LOW_STOCK_THRESHOLD]

    @property
    def out_of_stock(self) -> list[dict]:
        return [s for s in self.sweets if s["quantity"] == 0]

    @property
    def in_stock(self) -> list[dict]:
        return [s for s in self.sweets if s["quantity"] > LOW_STOCK_THRESHOLD]

    @property
    def stats(self) -> dict:
        """Dashboard figures, derived from the cached list."""
        return {
            "total_sweets": len(self.sweets),
            "total_value": sum(s["price"] * s["quantity"] for s in self.sweets),
            "low_stock": len(self.low_stock),
            "out_of_stock": len(self.out_of_stock),
            "total_categories": len(self.categories),
        }

    def fetch_sweets(self) -> list[dict]:
        self.sweets = self.api.list_sweets()
        return self.sweets

    def search(self, **criteria) -> list[dict]:
        """Server-side search; does not replace the cached list."""
        return self.api.search_sweets(**criteria)

    def filter_local(
        self,
        text: str = "",
        category: str | None = None,
        sort_by: str = "name",
    ) -> list[dict]:
        """Filter/sort the cached list without a round-trip."""
        needle = text.strip().lower()
        rows = [
            s for s in self.sweets
            if (not needle or needle in s["name"].lower())
            and (not category or s.get("category") == category)
        ]
        return sorted(rows, key=lambda s: s[sort_by])

    # ----- Mutations (each one refetches) -----

    def _mutate(self, action, *args) -> bool:
        """
        Run a mutation, then refresh the list, also after a failure since
        a multi-step mutation may have partly gone through.

        Returns False and records `error` for ordinary API failures.
        NotAuthenticated propagates so the caller can go back to login.
        """
        try:
            action(*args)
        except NotAuthenticated:
            self.sweets = []
            raise
        except ApiError as e:
            logger.warning("Sweet operation failed: %s", e.message)
            self.error = e.message
            self.fetch_sweets()
            return False

        self.error = None
        self.fetch_sweets()
        return True

    def add_sweet(self, sweet: dict) -> bool:
        return self._mutate(self.api.create_sweet, sweet)

    def update_sweet(self, sweet_id: str, changes: dict) -> bool:
        return self._mutate(self.api.update_sweet, sweet_id, changes)

    def delete_sweet(self, sweet_id: str) -> bool:
        return self._mutate(self.api.delete_sweet, sweet_id)

    def purchase_sweet(self, sweet_id: str, quantity: int = 1) -> bool:
        """
        Buy `quantity` units, one purchase call per unit.

        The cached stock is checked first; the server stays the judge, so
        a unit that sells out meanwhile stops the loop with OutOfStock.
        """
        sweet = next((s for s in self.sweets if s["id"] == sweet_id), None)
        if quantity < 1 or sweet is None or sweet["quantity"] < quantity:
            self.error = "Not enough stock available"
            return False

        def buy():
            for _ in range(quantity):
                self.api.purchase_sweet(sweet_id)

        return self._mutate(buy)

    def restock_sweet(self, sweet_id: str, amount: int = 1) -> bool:
        return self._mutate(self.api.restock_sweet, sweet_id, amount)
