"""Products app tests."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.settings import api_settings
from rest_framework.test import APIClient

from products.models import ProductCategory, Product


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class ProductCatalogTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.seller = User.objects.create_user(username='cat_seller', password='12345678', user_type='seller')
		cls.other_seller = User.objects.create_user(username='cat_seller_2', password='12345678', user_type='seller')
		cls.buyer = User.objects.create_user(username='cat_buyer', password='12345678', user_type='buyer')
		cls.category = ProductCategory.objects.create(category_name='Fashion')

		cls.active = Product.objects.create(
			seller=cls.seller, category=cls.category, name='Adire Shirt',
			description='Hand-dyed adire cotton shirt.', price=Decimal('12000.00'), stock=5,
		)
		cls.draft = Product.objects.create(
			seller=cls.seller, category=cls.category, name='Draft Item',
			description='Not published yet, still a draft.', price=Decimal('100.00'), stock=5, status='draft',
		)
		cls.foreign = Product.objects.create(
			seller=cls.other_seller, category=cls.category, name='Kente Scarf',
			description='Woven kente scarf from Bonwire.', price=Decimal('7000.00'), stock=3,
		)

	def test_anonymous_sees_only_active_products(self):
		res = APIClient().get('/api/products/')
		self.assertEqual(res.status_code, 200)
		names = {p['name'] for p in res.data['results']}
		self.assertEqual(names, {'Adire Shirt', 'Kente Scarf'})

	def test_search_and_ordering(self):
		res = APIClient().get('/api/products/', {'search': 'kente'})
		self.assertEqual([p['name'] for p in res.data['results']], ['Kente Scarf'])

		res = APIClient().get('/api/products/', {'ordering': 'price'})
		self.assertEqual([p['name'] for p in res.data['results']], ['Kente Scarf', 'Adire Shirt'])

	def test_seller_sees_own_products_only(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.get('/api/products/')
		names = {p['name'] for p in res.data['results']}
		self.assertEqual(names, {'Adire Shirt', 'Draft Item'})

	def test_seller_creates_product_with_generated_sku(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.post('/api/products/', data={
			'name': 'Aso Oke Cap',
			'description': 'Traditional aso oke cap, one size.',
			'price': '3500.00',
			'stock': 10,
			'category': self.category.id,
		}, format='multipart')
		self.assertEqual(res.status_code, 201, res.data)

		product = Product.objects.get(name='Aso Oke Cap')
		self.assertEqual(product.seller, self.seller)
		self.assertTrue(product.sku.startswith('SKU-'))

	def test_validation(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.post('/api/products/', data={
			'name': 'Bad', 'description': 'too short', 'price': '0', 'stock': 1,
		}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertIn('price', res.data)
		self.assertIn('description', res.data)

	def test_buyer_cannot_create(self):
		client = APIClient()
		client.force_authenticate(user=self.buyer)
		res = client.post('/api/products/', data={'name': 'x'}, format='json')
		self.assertEqual(res.status_code, 403)

	def test_seller_cannot_edit_foreign_product(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.patch(f'/api/products/{self.foreign.id}/', data={'price': '1.00'}, format='json')
		self.assertEqual(res.status_code, 404)

	def test_status_action(self):
		client = APIClient()
		client.force_authenticate(user=self.seller)
		res = client.patch(f'/api/products/{self.draft.id}/status/', data={'status': 'active'}, format='json')
		self.assertEqual(res.status_code, 200, res.data)
		self.assertEqual(res.data['status'], 'active')

		res = client.patch(f'/api/products/{self.draft.id}/status/', data={'status': 'active', 'stock': 0}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_stock_drives_out_of_stock_status(self):
		product = Product.objects.get(pk=self.active.pk)
		product.decrement_stock(5)
		product.refresh_from_db()
		self.assertEqual(product.status, 'out_of_stock')
		self.assertEqual(product.sales_count, 5)

		product.restore_stock(2)
		product.refresh_from_db()
		self.assertEqual(product.status, 'active')
		self.assertEqual(product.stock, 2)

		with self.assertRaises(ValueError):
			product.decrement_stock(3)

	def test_categories_are_public(self):
		res = APIClient().get('/api/categories/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data[0]['category_name'], 'Fashion')


class PaginationSettingsTests(SimpleTestCase):
	def test_default_paginator_does_not_come_from_app_views(self):
		# products.views imports rest_framework.viewsets, which reads this setting while loading.
		self.assertIs(api_settings.DEFAULT_PAGINATION_CLASS, PageNumberPagination)
