"""
Client-side shopping cart with quantity merging and stock clamping.

The store owns one session's cart. Quantities are always clamped into
[1, available_stock], never rejected. Every mutation recomputes the
totals and mirrors the full cart to the injected storage.
"""

import logging
from typing import List, Optional, Tuple, Union

from cidms_cart.core.exceptions import CartIndexError
from cidms_cart.models.cart import CartItemCandidate, CartLine, CartMutationResult, CartState
from cidms_cart.storage.base import CartStorage

logger = logging.getLogger(__name__)


def clamp(value: int, lower: int, upper: int) -> int:
    """Constrain value into [lower, upper]; lower wins if the range is empty."""
    return max(lower, min(value, upper))


class CartStore:
    """Cart for a single session, persisted through a CartStorage."""

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self._lines: List[CartLine] = self._rehydrate()
        self._total_items = 0
        self._total_amount = 0.0
        self._recompute_totals()

    # ---- read access ----

    @property
    def items(self) -> Tuple[CartLine, ...]:
        return tuple(line.model_copy() for line in self._lines)

    @property
    def total_items(self) -> int:
        return self._total_items

    @property
    def total_amount(self) -> float:
        return self._total_amount

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def state(self) -> CartState:
        """Snapshot of the cart, as persisted."""
        return CartState(
            items=list(self.items),
            total_items=self._total_items,
            total_amount=self._total_amount
        )

    def __len__(self) -> int:
        return len(self._lines)

    def index_of(self, product_id: str) -> Optional[int]:
        """Position of the line holding product_id, or None."""
        for index, line in enumerate(self._lines):
            if line.product_id == product_id:
                return index
        return None

    # ---- mutations ----

    def add_item(self, candidate: Union[CartItemCandidate, dict]) -> CartMutationResult:
        """
        Add a product to the cart, merging with an existing line for the same product.

        A merge adds the quantities and clamps to the existing line's stock
        snapshot; the existing line keeps its position, name, price, image
        and stock. A product with no stock at all is not added.

        Args:
            candidate: Product selection (model or dict with the same fields)

        Returns:
            The applied quantity and whether it was clamped
        """
        if not isinstance(candidate, CartItemCandidate):
            candidate = CartItemCandidate.model_validate(candidate)

        index = self.index_of(candidate.product_id)

        if index is not None:
            existing = self._lines[index]
            requested = existing.quantity + candidate.quantity
            quantity = clamp(requested, 1, existing.available_stock)
            self._lines[index] = existing.model_copy(update={"quantity": quantity})
        else:
            requested = candidate.quantity
            if candidate.available_stock < 1:
                logger.info(f"Not adding product {candidate.product_id} to cart: out of stock")
                return CartMutationResult(index=None, quantity=0, requested=requested, clamped=True)

            quantity = clamp(requested, 1, candidate.available_stock)
            self._lines.append(CartLine(
                product_id=candidate.product_id,
                name=candidate.name,
                unit_price=candidate.unit_price,
                image_ref=candidate.image_ref,
                quantity=quantity,
                available_stock=candidate.available_stock
            ))
            index = len(self._lines) - 1

        self._commit()
        return CartMutationResult(
            index=index,
            quantity=quantity,
            requested=requested,
            clamped=quantity != requested
        )

    def remove_item(self, index: int) -> CartLine:
        """
        Remove the line at the given position.

        Returns:
            The removed line

        Raises:
            CartIndexError: If index does not address a line
        """
        self._check_index(index)
        removed = self._lines.pop(index)
        self._commit()
        return removed

    def update_quantity(self, index: int, requested_quantity: int) -> CartMutationResult:
        """
        Set the quantity of the line at index, clamped to [1, available_stock].

        Use remove_item to delete a line; quantity can never reach 0 here.

        Raises:
            CartIndexError: If index does not address a line
        """
        self._check_index(index)
        line = self._lines[index]
        quantity = clamp(requested_quantity, 1, line.available_stock)
        self._lines[index] = line.model_copy(update={"quantity": quantity})

        self._commit()
        return CartMutationResult(
            index=index,
            quantity=quantity,
            requested=requested_quantity,
            clamped=quantity != requested_quantity
        )

    def clear(self) -> None:
        """Empty the cart and persist the empty state."""
        self._lines = []
        self._commit()

    def remove_product(self, product_id: str) -> CartLine:
        """Remove the line for product_id."""
        return self.remove_item(self._require_index(product_id))

    def update_product_quantity(self, product_id: str, requested_quantity: int) -> CartMutationResult:
        """Set the quantity of the line for product_id, clamped like update_quantity."""
        return self.update_quantity(self._require_index(product_id), requested_quantity)

    # ---- internal helpers ----

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            raise CartIndexError(
                f"No cart line at position {index} (cart has {len(self._lines)} lines)"
            )

    def _require_index(self, product_id: str) -> int:
        index = self.index_of(product_id)
        if index is None:
            raise CartIndexError(f"Product {product_id} is not in the cart")
        return index

    def _recompute_totals(self) -> None:
        self._total_items = sum(line.quantity for line in self._lines)
        self._total_amount = sum((line.unit_price * line.quantity for line in self._lines), 0.0)

    def _commit(self) -> None:
        self._recompute_totals()
        try:
            self.storage.save(self.state)
        except Exception:
            logger.exception(f"Failed to persist cart under key '{self.storage.key}'")

    def _rehydrate(self) -> List[CartLine]:
        try:
            state = self.storage.load()
        except Exception as e:
            logger.warning(f"Could not load persisted cart '{self.storage.key}', starting empty: {e}")
            return []

        if state is None:
            return []

        # Stored totals are ignored; lines are normalized to the cart invariants
        lines: List[CartLine] = []
        positions = {}
        for line in state.items:
            if line.product_id in positions:
                index = positions[line.product_id]
                existing = lines[index]
                quantity = clamp(existing.quantity + line.quantity, 1, existing.available_stock)
                lines[index] = existing.model_copy(update={"quantity": quantity})
                continue
            if line.available_stock < 1:
                logger.warning(f"Dropping out-of-stock product {line.product_id} from persisted cart")
                continue
            quantity = clamp(line.quantity, 1, line.available_stock)
            positions[line.product_id] = len(lines)
            lines.append(line.model_copy(update={"quantity": quantity}))

        return lines
