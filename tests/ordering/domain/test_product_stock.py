"""Domain tests for Product stock counters."""

from ordering.inventory.product import Product


class TestRecordSale:
    def test_moves_quantity_to_sold(self):
        product = Product(title="Lamp", price=20.0, quantity=10, sold=2, store_id="store-001")
        product.record_sale(3)
        assert product.quantity == 7
        assert product.sold == 5
        assert product.is_oversold is False

    def test_oversell_is_allowed_and_flagged(self):
        product = Product(title="Lamp", price=20.0, quantity=1, store_id="store-001")
        product.record_sale(3)
        assert product.quantity == -2
        assert product.sold == 3
        assert product.is_oversold is True
