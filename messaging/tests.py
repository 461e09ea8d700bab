"""Messaging app tests."""

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import SellerProfile
from messaging.models import Conversation, Message


@override_settings(ALLOWED_HOSTS=['testserver', 'localhost', '127.0.0.1'])
class ConversationTests(TestCase):
	@classmethod
	def setUpTestData(cls):
		User = get_user_model()
		cls.buyer = User.objects.create_user(username='msg_buyer', password='12345678', user_type='buyer')
		cls.stranger = User.objects.create_user(username='msg_stranger', password='12345678', user_type='buyer')
		cls.seller = User.objects.create_user(username='msg_seller', password='12345678', user_type='seller')
		SellerProfile.objects.create(user=cls.seller, business_name='Mama Put Kitchen')

	def client_for(self, user):
		client = APIClient()
		client.force_authenticate(user=user)
		return client

	def start(self, text='Do you deliver to Abuja?'):
		return self.client_for(self.buyer).post(
			'/api/messages/conversations/', data={'seller': self.seller.id, 'message': text}, format='json',
		)

	def test_buyer_starts_conversation(self):
		res = self.start()
		self.assertEqual(res.status_code, 201, res.data)
		conversation = Conversation.objects.get()
		self.assertEqual(conversation.last_message, 'Do you deliver to Abuja?')
		self.assertEqual(conversation.seller_unread_count, 1)
		self.assertEqual(conversation.buyer_unread_count, 0)

	def test_second_start_reopens_same_conversation(self):
		self.start()
		res = self.start('Hello again')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(Conversation.objects.count(), 1)
		self.assertEqual(Message.objects.count(), 2)
		self.assertEqual(Conversation.objects.get().seller_unread_count, 2)

	def test_seller_cannot_start(self):
		res = self.client_for(self.seller).post(
			'/api/messages/conversations/', data={'seller': self.seller.id, 'message': 'hi'}, format='json',
		)
		self.assertEqual(res.status_code, 403)

	def test_reply_and_mark_read(self):
		conversation_id = self.start().data['conversation']['id']
		seller = self.client_for(self.seller)

		res = seller.get(f'/api/messages/conversations/{conversation_id}/messages/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['count'], 1)

		res = seller.post(f'/api/messages/conversations/{conversation_id}/messages/', data={'text': 'Yes, 2 days.'}, format='json')
		self.assertEqual(res.status_code, 201)

		res = seller.put(f'/api/messages/conversations/{conversation_id}/read/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['marked_read'], 1)

		conversation = Conversation.objects.get(pk=conversation_id)
		self.assertEqual(conversation.seller_unread_count, 0)
		self.assertEqual(conversation.buyer_unread_count, 1)
		self.assertEqual(conversation.last_message, 'Yes, 2 days.')
		self.assertFalse(Message.objects.get(text='Yes, 2 days.').read)

	def test_blank_message_rejected(self):
		conversation_id = self.start().data['conversation']['id']
		res = self.client_for(self.buyer).post(
			f'/api/messages/conversations/{conversation_id}/messages/', data={'text': '   '}, format='json',
		)
		self.assertEqual(res.status_code, 400)

	def test_non_participant_gets_404(self):
		conversation_id = self.start().data['conversation']['id']
		stranger = self.client_for(self.stranger)
		self.assertEqual(stranger.get(f'/api/messages/conversations/{conversation_id}/messages/').status_code, 404)
		self.assertEqual(stranger.put(f'/api/messages/conversations/{conversation_id}/read/').status_code, 404)

	def test_list_conversations_shows_unread(self):
		self.start()
		res = self.client_for(self.seller).get('/api/messages/conversations/')
		self.assertEqual(res.status_code, 200)
		self.assertEqual(res.data['results'][0]['unread_count'], 1)
		self.assertEqual(res.data['results'][0]['business_name'], 'Mama Put Kitchen')

	def test_sellers_listing(self):
		res = self.client_for(self.buyer).get('/api/messages/sellers/', {'search': 'mama'})
		self.assertEqual(res.status_code, 200)
		self.assertEqual([s['username'] for s in res.data['results']], ['msg_seller'])
