from typing import List, Optional

from orders import OrderItem, SelectedOption


class Cart:
    """Line items picked from the menu, keyed by product and option.

    The option's price adjustment is folded into the unit price when an item
    is added, so totals never need to look at the option again.
    """

    def __init__(self, items: Optional[List[OrderItem]] = None) -> None:
        self._items: List[OrderItem] = list(items or [])

    @property
    def items(self) -> List[OrderItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_amount(self) -> int:
        return sum(item.total_price for item in self._items)

    def _index(self, product_name: str, option_name: Optional[str]) -> Optional[int]:
        for idx, item in enumerate(self._items):
            current = item.selected_option.name if item.selected_option else None
            if item.product_name == product_name and current == option_name:
                return idx
        return None

    def add(
        self,
        product_name: str,
        base_price: int,
        quantity: int = 1,
        option: Optional[SelectedOption] = None,
    ) -> OrderItem:
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        option_name = option.name if option else None
        idx = self._index(product_name, option_name)
        if idx is not None:
            existing = self._items[idx]
            updated = OrderItem(
                product_name=existing.product_name,
                quantity=existing.quantity + quantity,
                unit_price=existing.unit_price,
                selected_option=existing.selected_option,
            )
            self._items[idx] = updated
            return updated
        unit_price = base_price + (option.price_adjustment if option else 0)
        item = OrderItem(
            product_name=product_name,
            quantity=quantity,
            unit_price=unit_price,
            selected_option=option,
        )
        self._items.append(item)
        return item

    def update_quantity(
        self, product_name: str, quantity: int, option_name: Optional[str] = None
    ) -> None:
        idx = self._index(product_name, option_name)
        if idx is None:
            raise KeyError(product_name)
        if quantity <= 0:
            del self._items[idx]
            return
        existing = self._items[idx]
        self._items[idx] = OrderItem(
            product_name=existing.product_name,
            quantity=quantity,
            unit_price=existing.unit_price,
            selected_option=existing.selected_option,
        )

    def remove(self, product_name: str, option_name: Optional[str] = None) -> None:
        idx = self._index(product_name, option_name)
        if idx is not None:
            del self._items[idx]

    def clear(self) -> None:
        self._items.clear()
