"""
Tests for storefront wiring, configuration and database seeding
"""
import os
import tempfile
import unittest
from unittest import mock

from config import Config
from core.storefront import Storefront
from database.memory import MemoryStorage
from init_db import init_database


class TestStorefront(unittest.TestCase):
    """Test cases for Storefront"""

    def test_unconfigured_storefront_degrades(self):
        storefront = Storefront(Config())

        self.assertIsNone(storefront.db_connection)
        self.assertIsInstance(storefront.cart_storage, MemoryStorage)
        self.assertEqual(storefront.get_products().source, "fallback")
        self.assertIsNone(storefront.create_order(None))
        self.assertEqual(storefront.get_orders_by_email("ana@example.com"), [])

    def test_cart_for_uses_separate_slots(self):
        storefront = Storefront(Config())
        product = storefront.get_product_by_id("1").product

        storefront.cart_for("a").add_to_cart(product, 2)

        self.assertEqual(storefront.cart_for("a").get_cart_item_count(), 2)
        self.assertEqual(storefront.cart_for("b").get_cart_item_count(), 0)
        self.assertIn("sneakerstore_cart:a", storefront.cart_storage)

    def test_config_from_env(self):
        env = {
            "DATABASE_PATH": "",
            "PORT": "8080",
            "DEBUG": "true",
            "CATALOG_CACHE_TTL": "60",
            "CART_STORAGE_KEY": "carrito",
        }
        with mock.patch.dict(os.environ, env):
            config = Config.from_env()

        self.assertFalse(config.database_configured)
        self.assertEqual(config.port, 8080)
        self.assertTrue(config.debug)
        self.assertEqual(config.catalog_cache_ttl, 60.0)
        self.assertEqual(config.cart_storage_key, "carrito")


class TestInitDatabase(unittest.TestCase):

    def setUp(self):
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()

    def tearDown(self):
        os.unlink(self.test_db.name)

    def test_seeds_static_catalog_once(self):
        self.assertTrue(init_database(self.test_db.name))
        self.assertTrue(init_database(self.test_db.name))

        storefront = Storefront(Config(database_path=self.test_db.name))
        result = storefront.get_products()

        self.assertEqual(result.source, "database")
        self.assertEqual(len(result.products), 8)
        air_max = storefront.get_product_by_id("1").product
        self.assertEqual(air_max.sizes, ("38", "39", "40", "41", "42", "43", "44"))
        self.assertEqual(air_max.colors, ("Negro", "Blanco", "Rojo"))


if __name__ == '__main__':
    unittest.main()
