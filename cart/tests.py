"""Cart app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from cart.models import ShoppingCartItem
from products.models import ProductCategory, Product


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class CartStockValidationTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.buyer = User.objects.create_user(
			username='cart_buyer',
			email='cart_buyer@example.com',
			password='12345678',
			user_type='buyer',
		)
		cls.seller = User.objects.create_user(
			username='cart_seller',
			email='cart_seller@example.com',
			password='12345678',
			user_type='seller',
		)

		cls.category = ProductCategory.objects.create(category_name='TestCat')
		cls.product = Product.objects.create(
			seller=cls.seller,
			category=cls.category,
			name='CartProduct',
			description='A product used in cart tests.',
			price=Decimal('10.00'),
			stock=3,
		)

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.buyer)

	def test_add_item_within_stock(self):
		res = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 2}, format='json')
		self.assertEqual(res.status_code, 201, res.data)
		self.assertEqual(res.data['quantity'], 2)

		cart = self.client.get('/api/cart/')
		self.assertEqual(cart.status_code, 200)
		self.assertEqual(cart.data['item_count'], 2)
		self.assertEqual(Decimal(cart.data['total_price']), Decimal('20.00'))

	def test_add_more_than_stock_is_400(self):
		res = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 4}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertFalse(ShoppingCartItem.objects.exists())

	def test_adding_again_merges_and_respects_stock(self):
		self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 2}, format='json')
		res = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json')
		self.assertEqual(res.status_code, 201)
		self.assertEqual(ShoppingCartItem.objects.get().qty, 3)

		res = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertEqual(ShoppingCartItem.objects.get().qty, 3)

	def test_update_quantity_validates_stock(self):
		item_id = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json').data['id']

		res = self.client.patch(f'/api/cart/cart-items/{item_id}/', data={'quantity': 10}, format='json')
		self.assertEqual(res.status_code, 400)
		res = self.client.patch(f'/api/cart/cart-items/{item_id}/', data={'quantity': 3}, format='json')
		self.assertEqual(res.status_code, 200)

	def test_inactive_product_rejected(self):
		Product.objects.filter(pk=self.product.pk).update(status='inactive')
		res = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_remove_and_clear(self):
		item_id = self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json').data['id']
		self.assertEqual(self.client.delete(f'/api/cart/cart-items/{item_id}/').status_code, 204)

		self.client.post('/api/cart/cart-items/', data={'product': self.product.id, 'quantity': 1}, format='json')
		res = self.client.delete('/api/cart/clear/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['item_count'], 0)

	def test_seller_has_no_cart(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		self.assertEqual(client.get('/api/cart/').status_code, 403)
