"""Finance app tests: commission split, payment settlement, escrow and payouts."""

import hashlib
import hmac
import json
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import SellerProfile
from orders.models import Order
from .exceptions import PaymentGatewayError
from .models import Payout, Transaction, Wallet
from .split import calculate_split


def make_order(buyer, seller, total='10000.00', **extra):
	fields = dict(
		buyer=buyer,
		seller=seller,
		total_amount=Decimal(total),
		shipping_name='Ada Obi',
		shipping_address='12 Marina Road',
		shipping_city='Lagos',
		shipping_state='Lagos',
		shipping_phone='+2348031234567',
	)
	fields.update(extra)
	return Order.objects.create(**fields)


class CommissionSplitTests(SimpleTestCase):
	def test_default_five_percent(self):
		split = calculate_split(Decimal('10000'))
		self.assertEqual(split.admin_fee, Decimal('500.00'))
		self.assertEqual(split.seller_amount, Decimal('9500.00'))
		self.assertEqual(split.total, Decimal('10000.00'))

	def test_rounds_half_up_to_cents(self):
		split = calculate_split(Decimal('99.99'))
		self.assertEqual(split.admin_fee, Decimal('5.00'))
		self.assertEqual(split.seller_amount, Decimal('94.99'))

	def test_parts_always_add_up(self):
		for cents in list(range(0, 2000, 7)) + [123456789, 100000001]:
			amount = Decimal(cents) / 100
			split = calculate_split(amount)
			self.assertEqual(split.admin_fee + split.seller_amount, split.total, amount)
			self.assertGreaterEqual(split.seller_amount, 0)

	def test_rejects_bad_input(self):
		with self.assertRaises(ValueError):
			calculate_split(Decimal('-1'))
		with self.assertRaises(ValueError):
			calculate_split(Decimal('10'), admin_percentage=Decimal('1.5'))


@override_settings(
	ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'],
	PAYSTACK_SECRET_KEY='',
	PAYSTACK_USE_MOCK=True,
)
class FinanceTestBase(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.buyer = User.objects.create_user(
			username='fin_buyer',
			email='fin_buyer@example.com',
			password='12345678',
			user_type='buyer',
		)
		cls.other_buyer = User.objects.create_user(
			username='fin_buyer_2',
			email='fin_buyer2@example.com',
			password='12345678',
			user_type='buyer',
		)
		cls.seller = User.objects.create_user(
			username='fin_seller',
			email='fin_seller@example.com',
			password='12345678',
			user_type='seller',
		)
		cls.admin = User.objects.create_user(
			username='fin_admin',
			email='fin_admin@example.com',
			password='12345678',
			user_type='admin',
		)
		SellerProfile.objects.create(
			user=cls.seller,
			business_name='Obi Fabrics',
			bank_name='Access Bank',
			account_number='0123456789',
			account_name='Obi Fabrics Ltd',
			bank_code='044',
		)

	def setUp(self):
		self.client = APIClient()

	def as_user(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def initialize(self, order):
		res = self.as_user(self.buyer).post('/api/payments/initialize/', data={'order_id': order.id}, format='json')
		self.assertEqual(res.status_code, 200, res.data)
		return res.data['reference']

	def fund_wallet(self, balance):
		wallet, _ = Wallet.objects.get_or_create(seller=self.seller)
		wallet.balance = Decimal(balance)
		wallet.save()
		return wallet


class PaymentInitializeTests(FinanceTestBase):
	def test_initialize_records_split_transaction(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)

		tx = Transaction.objects.get(reference=reference)
		self.assertEqual(tx.status, 'pending')
		self.assertEqual(tx.amount, Decimal('10000.00'))
		self.assertEqual(tx.admin_fee, Decimal('500.00'))
		self.assertEqual(tx.seller_amount, Decimal('9500.00'))
		order.refresh_from_db()
		self.assertEqual(order.payment_reference, reference)

	def test_unknown_or_foreign_order_is_404(self):
		order = make_order(self.other_buyer, self.seller)
		client = self.as_user(self.buyer)

		res = client.post('/api/payments/initialize/', data={'order_id': order.id}, format='json')
		self.assertEqual(res.status_code, 404)
		res = client.post('/api/payments/initialize/', data={'order_id': 999999}, format='json')
		self.assertEqual(res.status_code, 404)

	def test_already_paid_order_is_400(self):
		order = make_order(self.buyer, self.seller, payment_status='completed')
		res = self.as_user(self.buyer).post('/api/payments/initialize/', data={'order_id': order.id}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertFalse(Transaction.objects.filter(order=order).exists())

	def test_seller_cannot_initialize(self):
		order = make_order(self.buyer, self.seller)
		res = self.as_user(self.seller).post('/api/payments/initialize/', data={'order_id': order.id}, format='json')
		self.assertEqual(res.status_code, 403)

	@override_settings(DEBUG=False)
	def test_gateway_error_is_500_without_details(self):
		order = make_order(self.buyer, self.seller)
		with mock.patch('finance.gateway.PaystackClient.initialize_payment', side_effect=PaymentGatewayError('boom')):
			res = self.as_user(self.buyer).post('/api/payments/initialize/', data={'order_id': order.id}, format='json')
		self.assertEqual(res.status_code, 500)
		self.assertNotIn('error', res.data)
		self.assertFalse(Transaction.objects.filter(order=order).exists())


class PaymentVerifyTests(FinanceTestBase):
	def test_verify_credits_pending_balance_once(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		client = self.as_user(self.buyer)

		first = client.get('/api/payments/verify/', {'reference': reference})
		second = client.get('/api/payments/verify/', {'reference': reference})
		self.assertEqual(first.status_code, 200, first.data)
		self.assertEqual(second.status_code, 200, second.data)

		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.pending_balance, Decimal('9500.00'))
		self.assertEqual(wallet.total_earnings, Decimal('9500.00'))
		self.assertEqual(wallet.total_admin_fees, Decimal('500.00'))
		self.assertEqual(wallet.balance, Decimal('0.00'))

		order.refresh_from_db()
		self.assertEqual(order.payment_status, 'completed')
		self.assertTrue(Transaction.objects.get(reference=reference).wallet_credited)

	def test_other_buyer_cannot_verify(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		res = self.as_user(self.other_buyer).get('/api/payments/verify/', {'reference': reference})
		self.assertEqual(res.status_code, 404)

	def test_failed_charge_is_400_and_not_credited(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		failed = {'status': 'failed', 'reference': reference, 'amount': None, 'raw': {}}
		with mock.patch('finance.gateway.PaystackClient.verify_payment', return_value=failed):
			res = self.as_user(self.buyer).get('/api/payments/verify/', {'reference': reference})

		self.assertEqual(res.status_code, 400)
		self.assertEqual(Transaction.objects.get(reference=reference).status, 'failed')
		self.assertFalse(Wallet.objects.filter(seller=self.seller, pending_balance__gt=0).exists())

	def test_short_payment_is_not_credited(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		short = {'status': 'success', 'reference': reference, 'amount': Decimal('100.00'), 'raw': {}}
		with mock.patch('finance.gateway.PaystackClient.verify_payment', return_value=short):
			res = self.as_user(self.buyer).get('/api/payments/verify/', {'reference': reference})

		self.assertEqual(res.status_code, 400)
		order.refresh_from_db()
		self.assertEqual(order.payment_status, 'pending')


@override_settings(PAYSTACK_SECRET_KEY='sk_test_webhook', PAYSTACK_USE_MOCK=True)
class WebhookTests(FinanceTestBase):
	def post_event(self, event, data, signature=None):
		body = json.dumps({'event': event, 'data': data}).encode('utf-8')
		if signature is None:
			signature = hmac.new(b'sk_test_webhook', body, hashlib.sha512).hexdigest()
		return self.client.post(
			'/api/payments/webhook/',
			data=body,
			content_type='application/json',
			HTTP_X_PAYSTACK_SIGNATURE=signature,
		)

	def test_bad_signature_is_rejected(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		res = self.post_event('charge.success', {'reference': reference, 'amount': 1000000}, signature='nope')
		self.assertEqual(res.status_code, 401)
		self.assertEqual(Transaction.objects.get(reference=reference).status, 'pending')

	def test_duplicate_charge_success_credits_once(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)

		for _ in range(2):
			res = self.post_event('charge.success', {'reference': reference, 'amount': 1000000})
			self.assertEqual(res.status_code, 200)

		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.pending_balance, Decimal('9500.00'))
		self.assertEqual(wallet.total_earnings, Decimal('9500.00'))

	def test_webhook_then_verify_credits_once(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		self.post_event('charge.success', {'reference': reference, 'amount': 1000000})

		res = self.as_user(self.buyer).get('/api/payments/verify/', {'reference': reference})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Wallet.objects.get(seller=self.seller).pending_balance, Decimal('9500.00'))

	def test_unknown_reference_is_acknowledged(self):
		res = self.post_event('charge.success', {'reference': 'PAY-UNKNOWN', 'amount': 100})
		self.assertEqual(res.status_code, 200)
		self.assertTrue(res.data['received'])

	def test_non_object_payload_is_400(self):
		for body in (b'[]', b'"x"', json.dumps({'event': 'charge.success', 'data': 'x'}).encode('utf-8')):
			signature = hmac.new(b'sk_test_webhook', body, hashlib.sha512).hexdigest()
			res = self.client.post(
				'/api/payments/webhook/',
				data=body,
				content_type='application/json',
				HTTP_X_PAYSTACK_SIGNATURE=signature,
			)
			self.assertEqual(res.status_code, 400, body)

	@override_settings(PAYSTACK_VERIFY_WEBHOOK_SIGNATURE=False)
	def test_unsigned_webhook_accepted_when_check_disabled(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		res = self.post_event('charge.success', {'reference': reference, 'amount': 1000000}, signature='')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Transaction.objects.get(reference=reference).status, 'success')


class EscrowReleaseTests(FinanceTestBase):
	def paid_order(self, **extra):
		order = make_order(self.buyer, self.seller, **extra)
		reference = self.initialize(order)
		self.as_user(self.buyer).get('/api/payments/verify/', {'reference': reference})
		order.refresh_from_db()
		return order

	def test_release_after_delivery_and_only_once(self):
		order = self.paid_order()
		Order.objects.filter(pk=order.pk).update(status='delivered', delivered_at=timezone.now())
		client = self.as_user(self.seller)

		res = client.post(f'/api/seller/orders/{order.id}/confirm-delivery/')
		self.assertEqual(res.status_code, 200, res.data)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('9500.00'))
		self.assertEqual(wallet.pending_balance, Decimal('0.00'))

		again = client.post(f'/api/seller/orders/{order.id}/confirm-delivery/')
		self.assertEqual(again.status_code, 400)
		self.assertEqual(Wallet.objects.get(seller=self.seller).balance, Decimal('9500.00'))

	def test_release_requires_delivery(self):
		order = self.paid_order()
		res = self.as_user(self.seller).post(f'/api/seller/orders/{order.id}/confirm-delivery/')
		self.assertEqual(res.status_code, 400)

	def test_release_without_payment_is_404(self):
		order = make_order(self.buyer, self.seller, status='delivered', delivered_at=timezone.now())
		res = self.as_user(self.seller).post(f'/api/seller/orders/{order.id}/confirm-delivery/')
		self.assertEqual(res.status_code, 404)

	def test_release_escrow_command_honours_period(self):
		old = self.paid_order()
		Order.objects.filter(pk=old.pk).update(status='delivered', delivered_at=timezone.now() - timedelta(days=10))
		fresh = self.paid_order()
		Order.objects.filter(pk=fresh.pk).update(status='delivered', delivered_at=timezone.now())

		out = StringIO()
		call_command('release_escrow', '--days', '7', stdout=out)

		old.refresh_from_db()
		fresh.refresh_from_db()
		self.assertTrue(old.funds_released)
		self.assertFalse(fresh.funds_released)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('9500.00'))
		self.assertEqual(wallet.pending_balance, Decimal('9500.00'))

	def test_release_escrow_dry_run_changes_nothing(self):
		order = self.paid_order()
		Order.objects.filter(pk=order.pk).update(status='delivered', delivered_at=timezone.now() - timedelta(days=30))

		call_command('release_escrow', '--dry-run', stdout=StringIO())
		order.refresh_from_db()
		self.assertFalse(order.funds_released)

	def test_release_escrow_skips_order_the_wallet_cannot_cover(self):
		first = self.paid_order()
		second = self.paid_order()
		long_ago = timezone.now() - timedelta(days=30)
		Order.objects.filter(pk__in=[first.pk, second.pk]).update(status='delivered', delivered_at=long_ago)
		# Pending balance only covers one of the two orders.
		Wallet.objects.filter(seller=self.seller).update(pending_balance=Decimal('9500.00'))

		out = StringIO()
		call_command('release_escrow', stdout=out)

		self.assertEqual(Order.objects.filter(pk__in=[first.pk, second.pk], funds_released=True).count(), 1)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('9500.00'))
		self.assertEqual(wallet.pending_balance, Decimal('0.00'))
		self.assertIn('1 order(s)', out.getvalue())


class PayoutRequestTests(FinanceTestBase):
	def test_payout_reserves_balance(self):
		self.fund_wallet('1000.00')
		res = self.as_user(self.seller).post('/api/payouts/request/', data={'amount': '400.00'}, format='json')
		self.assertEqual(res.status_code, 201, res.data)

		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('600.00'))
		self.assertEqual(wallet.locked_balance, Decimal('400.00'))
		payout = Payout.objects.get(seller=self.seller)
		self.assertEqual(payout.status, 'pending')
		self.assertEqual(payout.bank_details['account_number'], '0123456789')
		self.assertTrue(payout.reference.startswith('PAYOUT-'))

	def test_second_request_cannot_spend_reserved_funds(self):
		self.fund_wallet('1000.00')
		client = self.as_user(self.seller)
		self.assertEqual(client.post('/api/payouts/request/', data={'amount': '800.00'}, format='json').status_code, 201)

		res = client.post('/api/payouts/request/', data={'amount': '800.00'}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertEqual(res.data['detail'], 'Insufficient balance.')

	def test_amount_above_balance_is_400(self):
		self.fund_wallet('100.00')
		res = self.as_user(self.seller).post('/api/payouts/request/', data={'amount': '100.01'}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertFalse(Payout.objects.exists())

	def test_missing_or_non_positive_amount(self):
		client = self.as_user(self.seller)
		for body in ({}, {'amount': '0'}, {'amount': '-5'}):
			res = client.post('/api/payouts/request/', data=body, format='json')
			self.assertEqual(res.status_code, 400)
			self.assertEqual(res.data['detail'], 'Valid amount required.')

	def test_invalid_payout_method_reports_the_field(self):
		self.fund_wallet('1000.00')
		res = self.as_user(self.seller).post('/api/payouts/request/', data={'amount': '10.00', 'payout_method': 'crypto'}, format='json')
		self.assertEqual(res.status_code, 400)
		self.assertIn('payout_method', res.data)
		self.assertFalse(Payout.objects.exists())

	def test_bank_payout_needs_bank_details(self):
		SellerProfile.objects.filter(user=self.seller).update(bank_name=None, account_number=None)
		self.fund_wallet('1000.00')
		res = self.as_user(self.seller).post('/api/payouts/request/', data={'amount': '10.00'}, format='json')
		self.assertEqual(res.status_code, 400)

	def test_seller_cancel_releases_reservation(self):
		self.fund_wallet('1000.00')
		client = self.as_user(self.seller)
		payout_id = client.post('/api/payouts/request/', data={'amount': '250.00'}, format='json').data['payout']['id']

		res = client.post(f'/api/payouts/{payout_id}/cancel/')
		self.assertEqual(res.status_code, 200)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('1000.00'))
		self.assertEqual(wallet.locked_balance, Decimal('0.00'))

	def test_wallet_endpoint(self):
		self.fund_wallet('42.00')
		res = self.as_user(self.seller).get('/api/payouts/wallet/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['balance']), Decimal('42.00'))

	def test_buyer_cannot_request_payout(self):
		res = self.as_user(self.buyer).post('/api/payouts/request/', data={'amount': '1.00'}, format='json')
		self.assertEqual(res.status_code, 403)


class AdminPayoutTests(FinanceTestBase):
	def request(self, amount='500.00', method='bank'):
		self.fund_wallet('1000.00')
		res = self.as_user(self.seller).post(
			'/api/payouts/request/', data={'amount': amount, 'payout_method': method}, format='json',
		)
		self.assertEqual(res.status_code, 201, res.data)
		return res.data['payout']['id']

	def test_process_completes_bank_payout(self):
		payout_id = self.request()
		res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/process/')
		self.assertEqual(res.status_code, 200, res.data)
		self.assertEqual(res.data['status'], 'completed')

		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.locked_balance, Decimal('0.00'))
		self.assertEqual(wallet.total_withdrawn, Decimal('500.00'))
		self.assertIsNotNone(wallet.last_payout_date)
		self.assertTrue(SellerProfile.objects.get(user=self.seller).recipient_code)

	def test_transfer_goes_to_account_on_the_request(self):
		payout_id = self.request()
		res = self.as_user(self.seller).patch('/api/accounts/profile/section/', data={
			'section': 'payment',
			'data': {
				'payout_method': 'bank',
				'bank_name': 'GTBank',
				'account_number': '9999999999',
				'account_name': 'Obi Fabrics Ltd',
				'bank_code': '058',
			},
		}, format='json')
		self.assertEqual(res.status_code, 200, res.data)

		done = {'transfer_code': 'TRF_1', 'reference': 'x', 'amount': Decimal('500.00'), 'status': 'success', 'raw': {}}
		with mock.patch('finance.gateway.PaystackClient.initiate_transfer', return_value=done) as transfer:
			res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/process/')

		self.assertEqual(res.status_code, 200, res.data)
		self.assertEqual(transfer.call_args.kwargs['recipient_code'], 'RCP_mock_6789')
		# The seller's new account keeps its own recipient.
		self.assertEqual(SellerProfile.objects.get(user=self.seller).recipient_code, 'RCP_mock_9999')

	def test_process_twice_is_400(self):
		payout_id = self.request()
		client = self.as_user(self.admin)
		client.post(f'/api/admin/payouts/{payout_id}/process/')
		res = client.post(f'/api/admin/payouts/{payout_id}/process/')
		self.assertEqual(res.status_code, 400)

	def test_pending_transfer_stays_processing(self):
		payout_id = self.request()
		pending = {'transfer_code': 'TRF_1', 'reference': 'x', 'amount': Decimal('500.00'), 'status': 'pending', 'raw': {}}
		with mock.patch('finance.gateway.PaystackClient.initiate_transfer', return_value=pending):
			res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/process/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Payout.objects.get(pk=payout_id).status, 'processing')
		self.assertEqual(Wallet.objects.get(seller=self.seller).locked_balance, Decimal('500.00'))

	@override_settings(DEBUG=False)
	def test_gateway_failure_fails_payout_and_restores_balance(self):
		payout_id = self.request()
		with mock.patch('finance.gateway.PaystackClient.initiate_transfer', side_effect=PaymentGatewayError('bank down')):
			res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/process/')

		self.assertEqual(res.status_code, 500)
		payout = Payout.objects.get(pk=payout_id)
		self.assertEqual(payout.status, 'failed')
		self.assertIn('bank down', payout.admin_notes)
		wallet = Wallet.objects.get(seller=self.seller)
		self.assertEqual(wallet.balance, Decimal('1000.00'))
		self.assertEqual(wallet.locked_balance, Decimal('0.00'))

	def test_wallet_method_completes_immediately(self):
		payout_id = self.request(method='wallet')
		res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/process/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['status'], 'completed')

	def test_reject_releases_reservation(self):
		payout_id = self.request()
		res = self.as_user(self.admin).post(f'/api/admin/payouts/{payout_id}/reject/', data={'notes': 'KYC'}, format='json')
		self.assertEqual(res.status_code, 200)
		payout = Payout.objects.get(pk=payout_id)
		self.assertEqual(payout.status, 'cancelled')
		self.assertEqual(payout.admin_notes, 'KYC')
		self.assertEqual(Wallet.objects.get(seller=self.seller).balance, Decimal('1000.00'))

	def test_seller_cannot_process(self):
		payout_id = self.request()
		res = self.as_user(self.seller).post(f'/api/admin/payouts/{payout_id}/process/')
		self.assertEqual(res.status_code, 403)

	def test_list_filters_by_status(self):
		self.request()
		res = self.as_user(self.admin).get('/api/admin/payouts/', {'status': 'completed'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 0)

	def test_platform_earnings(self):
		order = make_order(self.buyer, self.seller)
		reference = self.initialize(order)
		self.as_user(self.buyer).get('/api/payments/verify/', {'reference': reference})

		res = self.as_user(self.admin).get('/api/admin/earnings/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Decimal(res.data['total_admin_fees']), Decimal('500.00'))
		self.assertEqual(res.data['successful_transactions'], 1)


@override_settings(PAYSTACK_SECRET_KEY='sk_test_webhook', PAYSTACK_USE_MOCK=True)
class TransferWebhookTests(FinanceTestBase):
	def test_transfer_failed_restores_balance(self):
		self.fund_wallet('1000.00')
		payout_id = self.as_user(self.seller).post(
			'/api/payouts/request/', data={'amount': '300.00'}, format='json',
		).data['payout']['id']
		payout = Payout.objects.get(pk=payout_id)
		Payout.objects.filter(pk=payout_id).update(status='processing')

		body = json.dumps({'event': 'transfer.failed', 'data': {'reference': payout.reference}}).encode('utf-8')
		signature = hmac.new(b'sk_test_webhook', body, hashlib.sha512).hexdigest()
		res = self.client.post('/api/payments/webhook/', data=body, content_type='application/json', HTTP_X_PAYSTACK_SIGNATURE=signature)

		self.assertEqual(res.status_code, 200)
		self.assertEqual(Payout.objects.get(pk=payout_id).status, 'failed')
		self.assertEqual(Wallet.objects.get(seller=self.seller).balance, Decimal('1000.00'))
