"""
Paystack API client.

Wraps the hosted-checkout, verification and transfer endpoints used by the
marketplace: https://paystack.com/docs/api/

Configuration (Django settings, read from the environment):
- PAYSTACK_SECRET_KEY / PAYSTACK_PUBLIC_KEY
- PAYSTACK_BASE_URL, PAYSTACK_TIMEOUT
- PAYSTACK_USE_MOCK: canned responses for local development
"""

import hashlib
import hmac
import logging
from decimal import Decimal
from typing import Dict, Optional

import requests
from django.conf import settings

from .exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class PaystackClient:
    """Thin client around the Paystack REST API.

    Every public method either returns the relevant part of Paystack's
    ``data`` payload or raises :class:`PaymentGatewayError`. Amounts are
    given and returned in naira; conversion to kobo happens here.
    """

    def __init__(self, secret_key: str = '', base_url: str = 'https://api.paystack.co',
                 timeout: float = 30, use_mock: bool = False):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.use_mock = use_mock

        if not self.use_mock and not self.secret_key:
            logger.warning('Paystack secret key not configured. Using mock mode.')
            self.use_mock = True

    def _get_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.secret_key}',
            'Content-Type': 'application/json',
        }

    def _make_request(self, method: str, endpoint: str, data: Optional[Dict] = None) -> Dict:
        """Call the API and return the decoded body.

        Raises:
            PaymentGatewayError: on timeout, transport error, non-2xx status
                or a body with ``status: false``.
        """
        url = f'{self.base_url}{endpoint}'

        try:
            if method.upper() == 'GET':
                response = requests.get(url, headers=self._get_headers(), params=data, timeout=self.timeout)
            else:
                response = requests.post(url, headers=self._get_headers(), json=data, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.Timeout:
            logger.error('Paystack API timeout: %s', endpoint)
            raise PaymentGatewayError('Payment gateway timed out. Please try again.')
        except requests.exceptions.RequestException as e:
            error_msg = str(e)
            body = {}
            if getattr(e, 'response', None) is not None:
                try:
                    body = e.response.json()
                    error_msg = body.get('message', error_msg)
                except ValueError:
                    pass
            logger.error('Paystack API error on %s: %s', endpoint, error_msg)
            raise PaymentGatewayError(f'API Error: {error_msg}', response=body)
        except ValueError:
            logger.error('Paystack API returned a non-JSON body: %s', endpoint)
            raise PaymentGatewayError('Payment gateway returned an invalid response.')

        # Paystack always returns a status field
        if not result.get('status'):
            raise PaymentGatewayError(result.get('message', 'Unknown error'), response=result)

        return result

    @staticmethod
    def to_kobo(amount) -> int:
        return int((Decimal(str(amount)) * 100).to_integral_value())

    @staticmethod
    def to_naira(kobo) -> Decimal:
        return (Decimal(kobo or 0) / 100).quantize(Decimal('0.01'))

    # ==========================================
    # PAYMENT INITIALIZATION & VERIFICATION
    # ==========================================

    def initialize_payment(self, email: str, amount: Decimal, reference: str,
                           callback_url: Optional[str] = None, metadata: Optional[Dict] = None) -> Dict:
        """Start a hosted checkout and return ``authorization_url``/``reference``."""
        if self.use_mock:
            logger.info('[MOCK] Payment initialized: %s for %s', amount, email)
            return {
                'authorization_url': f'https://checkout.paystack.com/mock/{reference}',
                'access_code': f'mock_access_{reference}',
                'reference': reference,
            }

        payload = {'email': email, 'amount': self.to_kobo(amount), 'reference': reference}
        if callback_url:
            payload['callback_url'] = callback_url
        if metadata:
            payload['metadata'] = metadata

        data = self._make_request('POST', '/transaction/initialize', data=payload)['data']
        logger.info('Payment initialized: %s', data.get('reference'))
        return {
            'authorization_url': data.get('authorization_url'),
            'access_code': data.get('access_code'),
            'reference': data.get('reference') or reference,
        }

    def verify_payment(self, reference: str) -> Dict:
        """Fetch the charge status for ``reference``.

        ``status`` is Paystack's own value (success, failed, abandoned, ...).
        ``amount`` is None in mock mode, where no real charge exists.
        """
        if self.use_mock:
            logger.info('[MOCK] Payment verified: %s', reference)
            return {
                'status': 'success',
                'reference': reference,
                'amount': None,
                'paid_at': None,
                'channel': 'card',
                'currency': 'NGN',
                'raw': {'mock': True, 'reference': reference},
            }

        data = self._make_request('GET', f'/transaction/verify/{reference}')['data']
        return {
            'status': data.get('status'),
            'reference': data.get('reference') or reference,
            'amount': self.to_naira(data.get('amount')),
            'paid_at': data.get('paid_at'),
            'channel': data.get('channel'),
            'currency': data.get('currency', 'NGN'),
            'raw': data,
        }

    # ==========================================
    # TRANSFERS (Payouts to sellers)
    # ==========================================

    def create_transfer_recipient(self, account_number: str, bank_code: str, name: str,
                                  currency: str = 'NGN') -> Dict:
        """Register a seller bank account and return its ``recipient_code``."""
        if self.use_mock:
            logger.info('[MOCK] Recipient created: %s', account_number[-4:])
            return {
                'recipient_code': f'RCP_mock_{account_number[-4:]}',
                'name': name,
                'account_number': account_number,
                'bank_code': bank_code,
            }

        data = self._make_request('POST', '/transferrecipient', data={
            'type': 'nuban',
            'name': name,
            'account_number': account_number,
            'bank_code': bank_code,
            'currency': currency,
        })['data']
        logger.info('Transfer recipient created: %s', data.get('recipient_code'))
        details = data.get('details') or {}
        return {
            'recipient_code': data.get('recipient_code'),
            'name': data.get('name'),
            'account_number': details.get('account_number'),
            'bank_code': details.get('bank_code'),
        }

    def initiate_transfer(self, recipient_code: str, amount: Decimal, reason: str, reference: str) -> Dict:
        """Send ``amount`` from the Paystack balance to a recipient.

        The returned ``status`` may be success, pending or otp; the final
        outcome of a pending transfer arrives as a ``transfer.*`` webhook.
        """
        if self.use_mock:
            logger.info('[MOCK] Transfer initiated: %s (%s)', amount, reference)
            return {
                'transfer_code': f'TRF_mock_{reference[-6:]}',
                'reference': reference,
                'amount': Decimal(str(amount)),
                'status': 'success',
                'raw': {'mock': True},
            }

        data = self._make_request('POST', '/transfer', data={
            'source': 'balance',
            'amount': self.to_kobo(amount),
            'recipient': recipient_code,
            'reason': reason,
            'reference': reference,
        })['data']
        logger.info('Transfer initiated: %s status=%s', data.get('transfer_code'), data.get('status'))
        return {
            'transfer_code': data.get('transfer_code'),
            'reference': data.get('reference') or reference,
            'amount': self.to_naira(data.get('amount')),
            'status': data.get('status'),
            'raw': data,
        }

    def verify_transfer(self, reference: str) -> Dict:
        if self.use_mock:
            return {'status': 'success', 'reference': reference, 'raw': {'mock': True}}

        data = self._make_request('GET', f'/transfer/verify/{reference}')['data']
        return {
            'status': data.get('status'),
            'reference': data.get('reference') or reference,
            'amount': self.to_naira(data.get('amount')),
            'raw': data,
        }

    # ==========================================
    # WEBHOOKS
    # ==========================================

    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        """Check ``X-Paystack-Signature`` (HMAC-SHA512 of the raw body)."""
        if not signature or not self.secret_key:
            return False
        expected = hmac.new(self.secret_key.encode('utf-8'), payload, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature)


def get_gateway() -> PaystackClient:
    """Build a client from the current Django settings."""
    return PaystackClient(
        secret_key=settings.PAYSTACK_SECRET_KEY,
        base_url=settings.PAYSTACK_BASE_URL,
        timeout=settings.PAYSTACK_TIMEOUT,
        use_mock=settings.PAYSTACK_USE_MOCK,
    )
