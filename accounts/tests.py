"""Accounts app tests: registration, profile sections and admin management."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import BuyerProfile, SellerProfile
from finance.models import Wallet


User = get_user_model()


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class RegistrationTests(TestCase):
	def register(self, **overrides):
		body = {
			'username': 'chinedu',
			'email': 'chinedu@example.com',
			'password': 'StrongPass123!',
			'user_type': 'buyer',
			'phone_number': '+234 803 123 4567',
		}
		body.update(overrides)
		return APIClient().post('/api/accounts/register/', data=body, format='json')

	def test_buyer_registration_creates_profile(self):
		res = self.register()
		self.assertEqual(res.status_code, 201, res.data)

		user = User.objects.get(username='chinedu')
		self.assertEqual(user.user_type, 'buyer')
		self.assertEqual(user.phone_number, '+2348031234567')
		self.assertTrue(BuyerProfile.objects.filter(user=user).exists())
		self.assertNotIn('password', res.data)

	def test_seller_registration_needs_business_details(self):
		res = self.register(user_type='seller')
		self.assertEqual(res.status_code, 400)
		self.assertIn('business_name', res.data)

		res = self.register(
			user_type='seller',
			business_name='Chinedu Electronics',
			business_type='electronics',
			business_address='Computer Village, Ikeja',
		)
		self.assertEqual(res.status_code, 201, res.data)
		user = User.objects.get(username='chinedu')
		self.assertEqual(user.seller_profile.business_name, 'Chinedu Electronics')
		self.assertTrue(Wallet.objects.filter(seller=user).exists())

	def test_invalid_phone_rejected(self):
		res = self.register(phone_number='12345')
		self.assertEqual(res.status_code, 400)
		self.assertIn('phone_number', res.data)

	def test_weak_password_rejected(self):
		res = self.register(password='12345678')
		self.assertEqual(res.status_code, 400)
		self.assertIn('password', res.data)

	def test_duplicate_email_rejected(self):
		self.register()
		res = self.register(username='chinedu2', email='CHINEDU@example.com')
		self.assertEqual(res.status_code, 400)
		self.assertIn('email', res.data)

	def test_admin_cannot_self_register(self):
		res = self.register(user_type='admin')
		self.assertEqual(res.status_code, 400)

	def test_login_returns_tokens(self):
		self.register()
		res = APIClient().post('/api/accounts/login/', data={'username': 'chinedu', 'password': 'StrongPass123!'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertIn('access', res.data)
		self.assertIn('refresh', res.data)


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'], PAYSTACK_SECRET_KEY='', PAYSTACK_USE_MOCK=True)
class ProfileSectionTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		cls.buyer = User.objects.create_user(username='pf_buyer', email='pf_buyer@example.com', password='StrongPass123!', user_type='buyer')
		BuyerProfile.objects.create(user=cls.buyer)
		cls.seller = User.objects.create_user(username='pf_seller', email='pf_seller@example.com', password='StrongPass123!', user_type='seller')
		SellerProfile.objects.create(user=cls.seller, business_name='Old Name', business_address='Yaba, Lagos')

	def client_for(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def patch_section(self, user, section, data):
		return self.client_for(user).patch('/api/accounts/profile/section/', data={'section': section, 'data': data}, format='json')

	def test_me_returns_role_profile(self):
		res = self.client_for(self.seller).get('/api/accounts/profile/me/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['profile']['business_name'], 'Old Name')

	def test_seller_business_section(self):
		res = self.patch_section(self.seller, 'business', {'business_name': 'New Name', 'business_type': 'fashion'})
		self.assertEqual(res.status_code, 200, res.data)
		profile = SellerProfile.objects.get(user=self.seller)
		self.assertEqual(profile.business_name, 'New Name')
		self.assertEqual(profile.business_type, 'fashion')

	def test_payment_section_validates_and_registers_recipient(self):
		res = self.patch_section(self.seller, 'payment', {'bank_name': 'GTBank', 'account_number': '12345'})
		self.assertEqual(res.status_code, 400)

		res = self.patch_section(self.seller, 'payment', {
			'payout_method': 'bank',
			'bank_name': 'GTBank',
			'account_number': '0123456789',
			'account_name': 'New Name Ltd',
			'bank_code': '058',
		})
		self.assertEqual(res.status_code, 200, res.data)
		profile = SellerProfile.objects.get(user=self.seller)
		self.assertEqual(profile.account_number, '0123456789')
		self.assertTrue(profile.recipient_code)

	def test_preferences_are_merged(self):
		res = self.patch_section(self.seller, 'communication', {'marketing': True})
		self.assertEqual(res.status_code, 200, res.data)
		prefs = SellerProfile.objects.get(user=self.seller).communication_preferences
		self.assertTrue(prefs['marketing'])
		self.assertTrue(prefs['order_updates'])

	def test_buyer_sections(self):
		res = self.patch_section(self.buyer, 'personal', {'first_name': 'Amaka', 'shipping_address': '3 Allen Ave, Ikeja'})
		self.assertEqual(res.status_code, 200, res.data)
		self.assertEqual(User.objects.get(pk=self.buyer.pk).first_name, 'Amaka')
		self.assertEqual(BuyerProfile.objects.get(user=self.buyer).shipping_address, '3 Allen Ave, Ikeja')

		res = self.patch_section(self.buyer, 'notifications', {'sms': True})
		self.assertEqual(res.status_code, 200)
		self.assertTrue(BuyerProfile.objects.get(user=self.buyer).notification_preferences['sms'])

	def test_unknown_section_is_400(self):
		res = self.patch_section(self.buyer, 'business', {'business_name': 'x'})
		self.assertEqual(res.status_code, 400)
		res = self.patch_section(self.seller, 'everything', {})
		self.assertEqual(res.status_code, 400)

	def test_change_password(self):
		client = self.client_for(self.buyer)
		res = client.post('/api/accounts/profile/change-password/', data={'current_password': 'wrong', 'new_password': 'AnotherPass456!'}, format='json')
		self.assertEqual(res.status_code, 400)

		res = client.post('/api/accounts/profile/change-password/', data={'current_password': 'StrongPass123!', 'new_password': 'AnotherPass456!'}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertTrue(User.objects.get(pk=self.buyer.pk).check_password('AnotherPass456!'))


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class AdminManagementTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		cls.admin = User.objects.create_user(username='mk_admin', password='StrongPass123!', user_type='admin')
		cls.buyer = User.objects.create_user(username='mk_buyer', email='mk_buyer@example.com', password='StrongPass123!', user_type='buyer')
		cls.seller = User.objects.create_user(username='mk_seller', password='StrongPass123!', user_type='seller')
		cls.profile = SellerProfile.objects.create(user=cls.seller, business_name='Pending Biz')

	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=self.admin)

	def test_list_and_filter_users(self):
		res = self.client.get('/api/admin/users/', {'user_type': 'seller'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual([u['username'] for u in res.data['results']], ['mk_seller'])

		res = self.client.get('/api/admin/users/', {'search': 'mk_buyer@'})
		self.assertEqual(res.data['count'], 1)

	def test_deactivate_user(self):
		res = self.client.put(f'/api/admin/users/{self.buyer.id}/status/', data={'is_active': False}, format='json')
		self.assertEqual(res.status_code, 200)
		self.assertFalse(User.objects.get(pk=self.buyer.pk).is_active)

	def test_cannot_deactivate_self(self):
		res = self.client.put(f'/api/admin/users/{self.admin.id}/status/', data={'is_active': False}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_delete_user(self):
		res = self.client.delete(f'/api/admin/users/{self.buyer.id}/')
		self.assertEqual(res.status_code, 204)
		self.assertFalse(User.objects.filter(pk=self.buyer.pk).exists())

	def test_seller_verification(self):
		res = self.client.get('/api/admin/verifications/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 1)

		res = self.client.post(f'/api/admin/verifications/{self.profile.id}/approve/')
		self.assertEqual(res.status_code, 200)
		self.profile.refresh_from_db()
		self.assertTrue(self.profile.is_verified)
		self.assertIsNotNone(self.profile.verified_at)

	def test_dashboard(self):
		res = self.client.get('/api/admin/dashboard/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['users']['sellers'], 1)
		self.assertEqual(res.data['users']['pending_verifications'], 1)

	def test_non_admin_forbidden(self):
		client = APIClient()
		client.force_authenticate(user=self.buyer)
		self.assertEqual(client.get('/api/admin/users/').status_code, 403)
		self.assertEqual(client.get('/api/admin/dashboard/').status_code, 403)
