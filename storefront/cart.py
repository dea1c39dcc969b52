"""
Cart line items, kept under the "cart" key.
"""
from storefront.pricing import LineItem, calculate_subtotal
from storefront.storage import CART_KEY, read_json, write_json


class Cart:
    def __init__(self, store):
        self.store = store

    def items(self):
        data = read_json(self.store, CART_KEY, [])
        if not isinstance(data, list):
            return []

        items = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            try:
                items.append(LineItem.from_dict(entry))
            except (TypeError, ValueError):
                continue
        return items

    def _save(self, items):
        write_json(self.store, CART_KEY, [item.to_dict() for item in items])

    def add_item(self, item_id, name, unit_price, quantity=1):
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        items = self.items()
        for index, item in enumerate(items):
            if item.id == item_id:
                items[index] = LineItem(item.id, item.name, item.unit_price, item.quantity + quantity)
                break
        else:
            items.append(LineItem(item_id, name, float(unit_price), quantity))
        self._save(items)
        return items

    def update_quantity(self, item_id, quantity):
        if quantity < 1:
            return self.remove_item(item_id)

        items = [
            LineItem(item.id, item.name, item.unit_price, quantity) if item.id == item_id else item
            for item in self.items()
        ]
        self._save(items)
        return items

    def remove_item(self, item_id):
        items = [item for item in self.items() if item.id != item_id]
        self._save(items)
        return items

    def subtotal(self):
        return round(calculate_subtotal(self.items()), 2)

    def clear(self):
        self.store.delete(CART_KEY)
