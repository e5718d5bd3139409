"""
Unit tests for the session cart.
"""

import pytest
from decimal import Decimal

from storefront.exceptions import NotFoundError, ValidationError
from storefront.services import cart_service
from storefront.services.pricing_service import compute_totals


class TestAddToCart:
    """Tests for add_to_cart."""

    def test_first_add_creates_line(self, plain_offering):
        cart = cart_service.new_cart()
        line, prompt = cart_service.add_to_cart(cart, plain_offering)

        assert prompt is None
        assert len(cart['lines']) == 1
        assert line['key'] == 'offering-a'
        assert line['type'] == cart_service.LINE_SERVICE
        assert line['quantity'] == 1
        assert Decimal(line['price']) == Decimal('800')

    def test_same_offering_twice_merges(self, plain_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, plain_offering)
        cart_service.add_to_cart(cart, plain_offering)

        assert len(cart['lines']) == 1
        assert cart['lines'][0]['quantity'] == 2

    def test_same_duration_twice_merges(self, duration_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, duration_offering, '6m')
        cart_service.add_to_cart(cart, duration_offering, '6m')

        assert len(cart['lines']) == 1
        assert cart['lines'][0]['key'] == 'offering-b:6m'
        assert cart['lines'][0]['quantity'] == 2

    def test_different_durations_are_separate_lines(self, duration_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, duration_offering, '1m')
        cart_service.add_to_cart(cart, duration_offering, '12m')

        keys = [line['key'] for line in cart['lines']]
        assert keys == ['offering-b:1m', 'offering-b:12m']
        assert [Decimal(line['price']) for line in cart['lines']] == [Decimal('700'), Decimal('7500')]

    def test_duration_defaults_to_one_month(self, duration_offering):
        cart = cart_service.new_cart()
        line, _ = cart_service.add_to_cart(cart, duration_offering)
        assert line['duration'] == '1m'
        assert line['key'] == 'offering-b:1m'

    def test_unknown_duration_rejected(self, duration_offering):
        cart = cart_service.new_cart()
        with pytest.raises(ValidationError):
            cart_service.add_to_cart(cart, duration_offering, '24m')
        assert cart['lines'] == []

    def test_website_design_returns_addon_prompt(self, website_offering):
        cart = cart_service.new_cart()
        line, prompt = cart_service.add_to_cart(cart, website_offering)

        assert line['quantity'] == 1
        assert prompt['offering_id'] == 'site-basic'
        assert [d['name'] for d in prompt['domains']][:1] == ['.com']
        assert prompt['durations'] == ['1m', '3m', '6m', '12m']


class TestLineEdits:
    """Tests for quantity updates and removal."""

    def test_quantity_never_below_one(self, plain_offering):
        cart = cart_service.new_cart()
        for _ in range(3):
            cart_service.add_to_cart(cart, plain_offering)

        line = cart_service.update_quantity(cart, 'offering-a', -100)
        assert line['quantity'] == 1
        assert len(cart['lines']) == 1

    def test_quantity_increment(self, plain_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, plain_offering)
        assert cart_service.update_quantity(cart, 'offering-a', 4)['quantity'] == 5

    def test_remove_then_add_starts_fresh(self, plain_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, plain_offering)
        cart_service.add_to_cart(cart, plain_offering)
        cart_service.remove_from_cart(cart, 'offering-a')
        assert cart['lines'] == []

        line, _ = cart_service.add_to_cart(cart, plain_offering)
        assert line['quantity'] == 1

    def test_remove_unknown_key(self):
        with pytest.raises(NotFoundError):
            cart_service.remove_from_cart(cart_service.new_cart(), 'missing')

    def test_insertion_order_kept(self, plain_offering, duration_offering, website_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, website_offering)
        cart_service.add_to_cart(cart, plain_offering)
        cart_service.add_to_cart(cart, duration_offering, '3m')
        assert [l['key'] for l in cart['lines']] == ['site-basic', 'offering-a', 'offering-b:3m']

    def test_clear_cart(self, scenario_cart):
        cart_service.clear_cart(scenario_cart)
        assert scenario_cart['lines'] == []
        assert compute_totals(scenario_cart['lines'])['total'] == Decimal('0')


class TestAddons:
    """Tests for domain and hosting add-ons."""

    def test_domain_and_hosting_lines(self):
        cart = cart_service.new_cart()
        added = cart_service.add_addons(cart, '.com', 'Business', '6m')

        assert [line['type'] for line in added] == ['domain', 'hosting']
        assert cart['lines'][0]['key'] == 'domain-.com'
        assert Decimal(cart['lines'][0]['price']) == Decimal('1500')
        assert cart['lines'][1]['key'] == 'hosting-Business-6m'
        assert Decimal(cart['lines'][1]['price']) == Decimal('3200')

    def test_skip_both(self):
        cart = cart_service.new_cart()
        assert cart_service.add_addons(cart, 'skip', 'skip') == []
        assert cart['lines'] == []

    def test_repeated_addon_merges(self):
        cart = cart_service.new_cart()
        cart_service.add_addons(cart, '.xyz', 'skip')
        cart_service.add_addons(cart, '.xyz', 'skip')

        assert len(cart['lines']) == 1
        assert cart['lines'][0]['quantity'] == 2

    def test_unknown_domain(self):
        with pytest.raises(ValidationError):
            cart_service.add_addons(cart_service.new_cart(), '.info', 'skip')

    def test_unknown_hosting_duration(self):
        with pytest.raises(ValidationError):
            cart_service.add_addons(cart_service.new_cart(), 'skip', 'Starter', '2m')

    def test_addon_key_does_not_clash_with_offering(self, plain_offering):
        cart = cart_service.new_cart()
        cart_service.add_to_cart(cart, plain_offering)
        cart_service.add_addons(cart, '.com', 'skip')
        assert len({line['key'] for line in cart['lines']}) == 2


def test_cart_summary(shop, scenario_cart):
    shop['cart'] = scenario_cart
    summary = cart_service.cart_summary(shop)

    assert summary['item_count'] == 3
    assert summary['total'] == Decimal('5000')
    assert [line['line_total'] for line in summary['lines']] == [Decimal('800'), Decimal('4200')]
