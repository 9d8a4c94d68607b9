"""
Tests for the durable cart service
"""
import json
import os
import tempfile
import unittest
from unittest import mock

from database.connection import DatabaseConnection
from database.memory import MemoryStorage
from database.repository import CartRepository
from models.cart import Cart, CartItem, LineItemKey
from models.product import Product
from services.cart_service import CART_STORAGE_KEY, CartService, format_price


SHOE = {
    "id": "1",
    "name": "Air Max 90",
    "brand": "Nike",
    "price": 480.0,
    "sizes": ["38", "39", "40"],
    "colors": ["Negro", "Blanco"],
    "stock": 15,
}


class TestCartService(unittest.TestCase):
    """Test cases for CartService on in-memory storage"""

    def setUp(self):
        self.storage = MemoryStorage()
        self.service = CartService(self.storage)

    def stored(self):
        return self.storage.get_item(CART_STORAGE_KEY)

    def test_missing_storage_behaves_as_empty_cart(self):
        service = CartService(None)
        cart = service.add_to_cart(SHOE)

        self.assertEqual(cart, Cart())
        self.assertFalse(service.save_cart(cart))
        self.assertEqual(service.get_cart_item_count(), 0)

    def test_empty_slot_returns_empty_cart(self):
        self.assertEqual(self.service.get_cart(), Cart())

    def test_corrupted_json_is_cleared(self):
        self.storage.set_item(CART_STORAGE_KEY, "not json")

        cart = self.service.get_cart()

        self.assertEqual(cart.items, ())
        self.assertEqual(cart.total, 0)
        self.assertIsNone(self.stored())

    def test_non_object_and_non_list_items_return_empty(self):
        self.storage.set_item(CART_STORAGE_KEY, "[1, 2]")
        self.assertEqual(self.service.get_cart(), Cart())

        self.storage.set_item(CART_STORAGE_KEY, '{"items": "nope", "total": 3}')
        self.assertEqual(self.service.get_cart(), Cart())

    def test_partial_corruption_is_healed(self):
        self.storage.set_item(CART_STORAGE_KEY, json.dumps({
            "items": [
                {"product": {"id": "1", "price": 10}, "quantity": 2},
                {"product": None, "quantity": 1},
            ],
            "total": 99,
        }))

        cart = self.service.get_cart()

        self.assertEqual(len(cart.items), 1)
        self.assertEqual(cart.items[0].quantity, 2)
        self.assertEqual(cart.total, 20)

        rewritten = json.loads(self.stored())
        self.assertEqual(len(rewritten["items"]), 1)
        self.assertEqual(rewritten["total"], 20)

    def test_all_items_invalid_clears_slot(self):
        self.storage.set_item(CART_STORAGE_KEY, json.dumps({
            "items": [{"product": {"name": "sin id"}, "quantity": 1}, "basura"],
            "total": 5,
        }))

        self.assertEqual(self.service.get_cart(), Cart())
        self.assertIsNone(self.stored())

    def test_read_drops_non_positive_quantities(self):
        self.storage.set_item(CART_STORAGE_KEY, json.dumps({
            "items": [
                {"product": {"id": "1", "price": 10}, "quantity": 0},
                {"product": {"id": "2", "price": 5}, "quantity": 1},
            ],
            "total": 5,
        }))

        cart = self.service.get_cart()

        self.assertEqual([item.product.id for item in cart.items], ["2"])

    def test_stored_total_must_match_exactly(self):
        self.storage.set_item(CART_STORAGE_KEY, json.dumps({
            "items": [{"product": {"id": "1", "price": 10}, "quantity": 2}],
            "total": 20.004,
        }))
        self.assertEqual(self.service.get_cart().total, 20)

    def test_save_keeps_total_within_tolerance(self):
        product = Product.from_dict(SHOE)
        cart = Cart(items=(CartItem(product, 1, "40", "Negro"),), total=480.005)

        self.assertTrue(self.service.save_cart(cart))
        self.assertEqual(json.loads(self.stored())["total"], 480.005)
        # al leer se exige igualdad exacta
        self.assertEqual(self.service.get_cart().total, 480.0)

    def test_save_replaces_wrong_total(self):
        product = Product.from_dict(SHOE)
        self.service.save_cart(Cart(items=(CartItem(product, 2, "40", "Negro"),), total=1))
        self.assertEqual(json.loads(self.stored())["total"], 960.0)

    def test_save_rejects_cart_without_item_list(self):
        self.assertFalse(self.service.save_cart({"items": None, "total": 0}))
        self.assertIsNone(self.stored())

    def test_save_refuses_fully_invalid_cart(self):
        self.service.add_to_cart(SHOE)
        before = self.stored()

        saved = self.service.save_cart({"items": [{"product": {"id": "1"}, "quantity": -1}], "total": 0})

        self.assertFalse(saved)
        self.assertEqual(self.stored(), before)

    def test_save_is_idempotent(self):
        self.service.add_to_cart(SHOE, 2)
        self.service.save_cart(self.service.get_cart())
        first = self.stored()
        self.service.save_cart(self.service.get_cart())
        self.assertEqual(self.stored(), first)

    def test_round_trip_recomputes_total(self):
        product = Product.from_dict(SHOE)
        cart = Cart(items=(CartItem(product, 3, "39", "Blanco"),), total=12345)

        self.service.save_cart(cart)
        loaded = self.service.get_cart()

        self.assertEqual(loaded.items, cart.items)
        self.assertEqual(loaded.total, 1440.0)

    def test_save_notifies_listeners_and_badge(self):
        calls = []
        self.service.subscribe(lambda: calls.append("updated"))

        self.service.add_to_cart(SHOE, 3)

        self.assertEqual(calls, ["updated"])
        self.assertEqual(self.service.badge.text, "3")
        self.assertTrue(self.service.badge.visible)

        self.service.clear_cart()
        self.assertEqual(self.service.badge.text, "")
        self.assertFalse(self.service.badge.visible)

    def test_failing_listener_does_not_break_save(self):
        def broken():
            raise RuntimeError("boom")

        seen = []
        self.service.subscribe(broken)
        self.service.subscribe(lambda: seen.append(True))

        self.service.add_to_cart(SHOE)

        self.assertEqual(seen, [True])

    def test_unsubscribe(self):
        calls = []
        listener = lambda: calls.append(1)  # noqa: E731
        self.service.subscribe(listener)
        self.service.unsubscribe(listener)
        self.service.add_to_cart(SHOE)
        self.assertEqual(calls, [])

    def test_add_defaults_size_and_color_to_first_option(self):
        cart = self.service.add_to_cart(SHOE)

        self.assertEqual(cart.items[0].key, LineItemKey("1", "38", "Negro"))
        self.assertEqual(cart.items[0].quantity, 1)

    def test_add_merges_and_normalizes_quantity(self):
        self.service.add_to_cart(SHOE, 2, "40", "Negro")
        cart = self.service.add_to_cart(SHOE, -5, "40", "Negro")

        self.assertEqual(len(cart.items), 1)
        self.assertEqual(cart.items[0].quantity, 3)
        self.assertEqual(cart.total, 1440.0)

    def test_add_rejects_incomplete_products(self):
        self.service.add_to_cart(SHOE)
        before = self.service.get_cart()

        for product in (None, {"name": "x", "price": 1}, {"id": "9", "price": 1},
                        {"id": "9", "name": "x", "price": 0}, {"id": "9", "name": "x", "price": "10"}):
            self.assertEqual(self.service.add_to_cart(product), before)

    def test_add_canonicalizes_product(self):
        cart = self.service.add_to_cart({"id": 7, "name": "Slip On", "price": 150, "stock": "mucho"})
        product = cart.items[0].product

        self.assertEqual(product.id, "7")
        self.assertEqual(product.price, 150.0)
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.sizes, ())
        self.assertEqual(cart.items[0].size, "")

    def test_add_accepts_product_model(self):
        cart = self.service.add_to_cart(Product.from_dict(SHOE), 1, "40", "Blanco")
        self.assertEqual(cart.items[0].key, LineItemKey("1", "40", "Blanco"))

    def test_remove_and_update_quantity(self):
        self.service.add_to_cart(SHOE, 1, "40", "Negro")
        self.service.add_to_cart(SHOE, 1, "41", "Negro")

        cart = self.service.update_cart_item_quantity("1-40-Negro", 4)
        self.assertEqual(cart.items[0].quantity, 4)
        self.assertEqual(self.service.get_cart_item_count(), 5)

        cart = self.service.remove_from_cart(LineItemKey("1", "41", "Negro"))
        self.assertEqual(len(cart.items), 1)
        self.assertEqual(self.service.get_cart(), cart)

        cart = self.service.update_cart_item_quantity("1-40-Negro", 0)
        self.assertEqual(cart.items, ())

    def test_clear_cart(self):
        self.service.add_to_cart(SHOE, 2)
        self.service.clear_cart()
        self.assertEqual(json.loads(self.stored()), {"items": [], "total": 0})

    def test_format_price(self):
        self.assertEqual(format_price(480), "S/ 480.00")
        self.assertEqual(format_price(1234.5), "S/ 1,234.50")
        self.assertEqual(format_price(0), "S/ 0.00")

    def test_non_standard_json_constants_clear_slot(self):
        for constant in ("Infinity", "NaN", "-Infinity"):
            self.storage.set_item(
                CART_STORAGE_KEY,
                '{"items": [{"product": {"id": "1", "price": 10, "stock": %s}, "quantity": 1}], "total": 10}' % constant,
            )

            self.assertEqual(self.service.get_cart(), Cart())
            self.assertIsNone(self.stored())

    def test_nan_quantity_is_not_accepted(self):
        self.storage.set_item(
            CART_STORAGE_KEY,
            '{"items": [{"product": {"id": "1", "price": 10}, "quantity": NaN}], "total": 10}',
        )

        cart = self.service.get_cart()

        self.assertEqual(cart.items, ())
        self.assertEqual(cart.total, 0)

    def test_overflowing_numbers_are_treated_as_invalid(self):
        # 1e309 는 표준 JSON 숫자지만 float 으로는 inf 가 된다
        self.storage.set_item(CART_STORAGE_KEY, '{"items": ['
                              '{"product": {"id": "1", "price": 10, "stock": 1e309}, "quantity": 2}, '
                              '{"product": {"id": "2", "price": 5}, "quantity": 1e309}'
                              '], "total": 20}')

        cart = self.service.get_cart()

        self.assertEqual([item.product.id for item in cart.items], ["1"])
        self.assertEqual(cart.items[0].product.stock, 0)
        self.assertEqual(cart.total, 20)
        self.assertEqual(len(json.loads(self.stored())["items"]), 1)

    def test_unparseable_items_clear_slot(self):
        self.service.add_to_cart(SHOE)

        with mock.patch("services.cart_service.parse_item", side_effect=RuntimeError("boom")):
            cart = self.service.get_cart()

        self.assertEqual(cart, Cart())
        self.assertIsNone(self.stored())

    def test_add_with_non_finite_numbers(self):
        cart = self.service.add_to_cart(dict(SHOE, stock=float("inf"), rating=float("nan")), float("nan"))

        self.assertEqual(cart.items[0].quantity, 1)
        self.assertEqual(cart.items[0].product.stock, 0)
        self.assertIsNone(cart.items[0].product.rating)

        before = self.service.get_cart()
        self.assertEqual(self.service.add_to_cart(dict(SHOE, id="2", price=float("inf"))), before)

    def test_product_list_fields_are_immutable(self):
        product = Product(id="1", name="Air", brand="Nike", price=10.0, sizes=["40"], colors=["Negro"])

        self.assertEqual(product.sizes, ("40",))
        self.assertEqual(hash(product), hash(Product.from_dict(product.to_dict())))


class DriftingStorage(MemoryStorage):
    """Slot store whose read-back differs from what was written"""

    def get_item(self, key):
        value = super().get_item(key)
        return value + " " if value else value


class FailingStorage(MemoryStorage):
    """Slot store whose first write fails"""

    def __init__(self):
        super().__init__()
        self.writes = 0

    def set_item(self, key, value):
        self.writes += 1
        if self.writes == 1:
            raise OSError("quota exceeded")
        super().set_item(key, value)


class TestCartServiceWriteFailures(unittest.TestCase):
    """Save paths where the slot write does not stick"""

    def setUp(self):
        self.calls = []

    def make_service(self, storage):
        service = CartService(storage)
        service.subscribe(lambda: self.calls.append("updated"))
        return service

    def test_verification_mismatch_is_not_reported_as_saved(self):
        storage = DriftingStorage()
        service = self.make_service(storage)
        cart = Cart(items=(CartItem(Product.from_dict(SHOE), 2, "40", "Negro"),), total=960.0)

        self.assertFalse(service.save_cart(cart))
        self.assertEqual(self.calls, [])
        self.assertEqual(service.badge.text, "")
        self.assertFalse(service.badge.visible)
        self.assertEqual(json.loads(storage._slots[CART_STORAGE_KEY])["total"], 960.0)

    def test_write_error_resets_slot_to_empty_cart(self):
        storage = FailingStorage()
        service = self.make_service(storage)
        cart = Cart(items=(CartItem(Product.from_dict(SHOE), 1, "40", "Negro"),), total=480.0)

        self.assertFalse(service.save_cart(cart))
        self.assertEqual(storage.writes, 2)
        self.assertEqual(json.loads(storage.get_item(CART_STORAGE_KEY)), {"items": [], "total": 0})
        self.assertEqual(self.calls, [])
        self.assertFalse(service.badge.visible)
        self.assertEqual(service.get_cart(), Cart())


class TestCartServiceOnDatabase(unittest.TestCase):
    """CartService backed by the SQLite cart slot table"""

    def setUp(self):
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()
        self.repo = CartRepository(DatabaseConnection(self.test_db.name))

    def tearDown(self):
        os.unlink(self.test_db.name)

    def test_slots_are_isolated_per_key(self):
        first = CartService(self.repo, storage_key="cart:a")
        second = CartService(self.repo, storage_key="cart:b")

        first.add_to_cart(SHOE, 2)

        self.assertEqual(first.get_cart_item_count(), 2)
        self.assertEqual(second.get_cart_item_count(), 0)

    def test_cart_survives_new_service_instance(self):
        CartService(self.repo).add_to_cart(SHOE, 1, "40", "Negro")
        cart = CartService(self.repo).get_cart()
        self.assertEqual(cart.items[0].key, LineItemKey("1", "40", "Negro"))

    def test_corrupted_slot_is_removed(self):
        self.repo.set_item(CART_STORAGE_KEY, "{broken")
        self.assertEqual(CartService(self.repo).get_cart(), Cart())
        self.assertIsNone(self.repo.get_item(CART_STORAGE_KEY))


if __name__ == '__main__':
    unittest.main()
