"""Orders app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from cart.models import ShoppingCart, ShoppingCartItem
from finance.models import Transaction, Wallet
from finance.services import settle_successful_charge
from orders.models import Order
from products.models import ProductCategory, Product


SHIPPING = {
	'name': 'Ada Obi',
	'address': '12 Marina Road',
	'city': 'Lagos',
	'state': 'Lagos',
	'phone': '+2348031234567',
}


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderCheckoutTests(TestCase):
	"""Checkout from the cart and from explicit items."""

	@classmethod
	def setUpTestData(cls):
		User = get_user_model()

		cls.buyer = User.objects.create_user(
			username='test_buyer',
			email='test_buyer@example.com',
			password='12345678',
			user_type='buyer',
		)
		cls.seller = User.objects.create_user(
			username='test_seller',
			email='test_seller@example.com',
			password='12345678',
			user_type='seller',
		)
		cls.other_seller = User.objects.create_user(
			username='test_seller_2',
			email='test_seller2@example.com',
			password='12345678',
			user_type='seller',
		)

		cls.category = ProductCategory.objects.create(category_name='TestCat')
		cls.product = Product.objects.create(
			seller=cls.seller,
			category=cls.category,
			name='Ankara Fabric',
			description='Six yards of printed cotton fabric.',
			price=Decimal('2500.00'),
			stock=100,
		)
		cls.product2 = Product.objects.create(
			seller=cls.other_seller,
			category=cls.category,
			name='Leather Sandals',
			description='Handmade leather sandals from Kano.',
			price=Decimal('8000.00'),
			stock=50,
		)

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.buyer)

	def checkout(self, **extra):
		body = {'shipping_address': SHIPPING}
		body.update(extra)
		return self.client.post('/api/buyer/orders/', data=body, format='json')

	def fill_cart(self, *entries):
		cart, _ = ShoppingCart.objects.get_or_create(user=self.buyer)
		for product, qty in entries:
			ShoppingCartItem.objects.create(cart=cart, product=product, qty=qty)
		return cart

	def test_cart_checkout_returns_201_and_clears_cart(self):
		cart = self.fill_cart((self.product, 2))

		res = self.checkout()
		self.assertEqual(res.status_code, 201, res.data)

		cart.refresh_from_db()
		self.assertEqual(cart.items.count(), 0)

		self.assertEqual(len(res.data['orders']), 1)
		order = Order.objects.get(id=res.data['orders'][0]['id'])
		self.assertEqual(order.buyer_id, self.buyer.id)
		self.assertEqual(order.status, 'pending')
		self.assertEqual(order.total_amount, Decimal('5000.00'))
		self.assertTrue(order.order_number.startswith('ORD-'))

		self.product.refresh_from_db()
		self.assertEqual(self.product.stock, 98)
		self.assertEqual(self.product.sales_count, 2)

	def test_checkout_splits_orders_by_seller(self):
		res = self.checkout(items=[
			{'product': self.product.id, 'quantity': 1},
			{'product': self.product2.id, 'quantity': 2},
		])
		self.assertEqual(res.status_code, 201, res.data)
		self.assertEqual(len(res.data['orders']), 2)

		totals = {o.seller_id: o.total_amount for o in Order.objects.filter(buyer=self.buyer)}
		self.assertEqual(totals[self.seller.id], Decimal('2500.00'))
		self.assertEqual(totals[self.other_seller.id], Decimal('16000.00'))

	def test_line_prices_are_snapshots(self):
		res = self.checkout(items=[{'product': self.product.id, 'quantity': 1}])
		order = Order.objects.get(id=res.data['orders'][0]['id'])

		Product.objects.filter(pk=self.product.pk).update(price=Decimal('9999.00'))
		line = order.lines.get()
		self.assertEqual(line.price, Decimal('2500.00'))
		self.assertEqual(line.product_name, 'Ankara Fabric')

	def test_checkout_fails_when_insufficient_stock_and_cart_unchanged(self):
		Product.objects.filter(pk=self.product.pk).update(stock=1)
		cart = self.fill_cart((self.product, 2))

		res = self.checkout()
		self.assertEqual(res.status_code, 400)

		cart.refresh_from_db()
		self.assertEqual(cart.items.count(), 1)
		self.product.refresh_from_db()
		self.assertEqual(self.product.stock, 1)
		self.assertFalse(Order.objects.exists())

	def test_empty_cart_is_400(self):
		res = self.checkout()
		self.assertEqual(res.status_code, 400)

	def test_inactive_product_rejected(self):
		Product.objects.filter(pk=self.product2.pk).update(status='inactive')
		res = self.checkout(items=[
			{'product': self.product.id, 'quantity': 1},
			{'product': self.product2.id, 'quantity': 1},
		])
		self.assertEqual(res.status_code, 400)
		self.product.refresh_from_db()
		self.assertEqual(self.product.stock, 100)

	def test_seller_cannot_checkout(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.post('/api/buyer/orders/', data={'shipping_address': SHIPPING}, format='json')
		self.assertEqual(res.status_code, 403)


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class OrderLifecycleTests(TestCase):
	"""Cancellation, seller status transitions and receipt confirmation."""

	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.buyer = User.objects.create_user(username='life_buyer', password='12345678', user_type='buyer')
		cls.seller = User.objects.create_user(username='life_seller', password='12345678', user_type='seller')
		cls.other_seller = User.objects.create_user(username='life_seller_2', password='12345678', user_type='seller')
		cls.product = Product.objects.create(
			seller=cls.seller,
			name='Shea Butter',
			description='Unrefined shea butter, 500g tub.',
			price=Decimal('1500.00'),
			stock=20,
		)

	def setUp(self):
		self.buyer_client = APIClient()
		self.buyer_client.force_authenticate(user=self.buyer)
		self.seller_client = APIClient()
		self.seller_client.force_authenticate(user=self.seller)

		res = self.buyer_client.post(
			'/api/buyer/orders/',
			data={'shipping_address': SHIPPING, 'items': [{'product': self.product.id, 'quantity': 3}]},
			format='json',
		)
		self.assertEqual(res.status_code, 201, res.data)
		self.order = Order.objects.get(id=res.data['orders'][0]['id'])

	def set_status(self, value, client=None, **extra):
		body = {'status': value}
		body.update(extra)
		return (client or self.seller_client).patch(f'/api/seller/orders/{self.order.id}/set-status/', data=body, format='json')

	def pay(self):
		tx = Transaction.objects.create(
			order=self.order,
			buyer=self.buyer,
			seller=self.seller,
			amount=Decimal('4500.00'),
			admin_fee=Decimal('225.00'),
			seller_amount=Decimal('4275.00'),
		)
		settle_successful_charge(tx.reference)
		self.order.refresh_from_db()

	def test_buyer_cancel_restores_stock(self):
		res = self.buyer_client.post(f'/api/buyer/orders/{self.order.id}/cancel/', data={'reason': 'Changed my mind'}, format='json')
		self.assertEqual(res.status_code, 200, res.data)

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, 'cancelled')
		self.assertEqual(self.order.cancellation_reason, 'Changed my mind')
		self.product.refresh_from_db()
		self.assertEqual(self.product.stock, 20)

	def test_buyer_cannot_cancel_paid_order(self):
		self.pay()
		res = self.buyer_client.post(f'/api/buyer/orders/{self.order.id}/cancel/')
		self.assertEqual(res.status_code, 400)

	def test_seller_cancel_restores_stock(self):
		res = self.set_status('cancelled')
		self.assertEqual(res.status_code, 200, res.data)
		self.product.refresh_from_db()
		self.assertEqual(self.product.stock, 20)

	def test_transitions_are_enforced(self):
		self.assertEqual(self.set_status('shipped').status_code, 400)
		self.assertEqual(self.set_status('confirmed').status_code, 200)
		self.assertEqual(self.set_status('processing').status_code, 200)

		res = self.set_status('shipped', carrier='GIG Logistics', tracking_number='GIG123')
		self.assertEqual(res.status_code, 200)
		self.order.refresh_from_db()
		self.assertIsNotNone(self.order.shipped_at)
		self.assertIsNotNone(self.order.estimated_delivery)
		self.assertEqual(self.order.tracking_number, 'GIG123')

		self.assertEqual(self.set_status('cancelled').status_code, 400)
		self.assertEqual(self.set_status('delivered').status_code, 200)
		self.order.refresh_from_db()
		self.assertIsNotNone(self.order.delivered_at)

	def test_other_seller_gets_404(self):
		client = APIClient()
		client.force_authenticate(user=self.other_seller)
		res = self.set_status('confirmed', client=client)
		self.assertEqual(res.status_code, 404)
		self.order.refresh_from_db()
		self.assertEqual(self.order.status, 'pending')

	def test_confirm_receipt_releases_funds(self):
		self.pay()
		Order.objects.filter(pk=self.order.pk).update(status='shipped')

		res = self.buyer_client.post(f'/api/buyer/orders/{self.order.id}/confirm-receipt/')
		self.assertEqual(res.status_code, 200, res.data)
		self.assertTrue(res.data['funds_released'])

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, 'delivered')
		self.assertTrue(self.order.funds_released)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('4275.00'))
		self.assertEqual(wallet.pending_balance, Decimal('0.00'))

	def test_confirm_receipt_requires_shipment(self):
		res = self.buyer_client.post(f'/api/buyer/orders/{self.order.id}/confirm-receipt/')
		self.assertEqual(res.status_code, 400)

	def test_buyer_list_filters_by_status(self):
		res = self.buyer_client.get('/api/buyer/orders/', {'status': 'cancelled'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 0)
		res = self.buyer_client.get('/api/buyer/orders/', {'status': 'pending'})
		self.assertEqual(res.data['count'], 1)

	def test_dashboards(self):
		res = self.buyer_client.get('/api/buyer/dashboard/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['total_orders'], 1)

		res = self.seller_client.get('/api/seller/dashboard/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['total_orders'], 1)
		self.assertIn('wallet', res.data)
