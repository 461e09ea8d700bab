"""Helpdesk app tests."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class HelpCenterTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		cls.buyer = get_user_model().objects.create_user(username='help_buyer', password='12345678', user_type='buyer')

	def contact(self, client, **overrides):
		body = {
			'name': 'Ngozi Eze',
			'email': 'ngozi@example.com',
			'subject': 'Order not delivered',
			'message': 'My order has been in transit for two weeks.',
		}
		body.update(overrides)
		return client.post('/api/help/contact/', data=body, format='json')

	def test_public_content(self):
		client = APIClient()
		res = client.get('/api/help/sections/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data[0]['id'], 'help-center')

		res = client.get('/api/help/faqs/')
		self.assertEqual(res.status_code, 200)
		self.assertTrue(len(res.data) > 0)

	def test_faq_category_filter(self):
		res = APIClient().get('/api/help/faqs/', {'category': 'payments'})
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.data)
		self.assertEqual({faq['category'] for faq in res.data}, {'payments'})

		res = APIClient().get('/api/help/faqs/', {'category': 'astrology'})
		self.assertEqual(res.status_code, 400)

	def test_article_lookup(self):
		res = APIClient().get('/api/help/articles/buying-guide/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['title'], 'Buying Guide')

		res = APIClient().get('/api/help/articles/no-such-topic/')
		self.assertEqual(res.status_code, 404)

	def test_contact_requires_login(self):
		res = self.contact(APIClient())
		self.assertEqual(res.status_code, 401)

	def test_contact_returns_ticket(self):
		client = APIClient()
		client.force_authenticate(user=self.buyer)
		with self.assertLogs('helpdesk.views', level='INFO') as logs:
			res = self.contact(client)
		self.assertEqual(res.status_code, 201, res.data)
		self.assertTrue(res.data['ticket_id'].startswith('TKT-'))
		self.assertIn(res.data['ticket_id'], logs.output[0])

	def test_contact_validates_fields(self):
		client = APIClient()
		client.force_authenticate(user=self.buyer)
		res = self.contact(client, email='not-an-email', subject='')
		self.assertEqual(res.status_code, 400)
		self.assertIn('email', res.data)
		self.assertIn('subject', res.data)

		res = self.contact(client, message='help')
		self.assertEqual(res.status_code, 400)
		self.assertIn('message', res.data)
