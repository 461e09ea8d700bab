"""Static help center content served by the helpdesk API."""

HELP_SECTIONS = [
    {
        'id': 'help-center',
        'title': 'Help Center',
        'description': 'Find answers to common questions and get support',
        'sections': [
            'How to buy products',
            'How to contact sellers',
            'Return policy',
            'Payment issues',
            'Account settings',
            'Shipping information',
            'Canceling orders',
            'Product quality issues',
        ],
    },
    {
        'id': 'privacy-security',
        'title': 'Privacy & Security',
        'description': 'Learn about our security measures and privacy policies',
        'sections': [
            'Privacy policy',
            'Data protection',
            'Safe transactions',
            'Report suspicious activity',
            'Account security',
            'Data usage',
            'Cookie policy',
        ],
    },
    {
        'id': 'about-marketplace',
        'title': 'About Marketplace',
        'description': 'Learn about our platform and community guidelines',
        'sections': [
            'About us',
            'Terms of service',
            'Community guidelines',
            'Contact support',
            'Feedback & suggestions',
            'Partnership opportunities',
        ],
    },
]

FAQS = [
    {
        'id': 1,
        'question': 'How do I create an account?',
        'answer': 'Click "Sign Up", choose whether you are buying or selling, and fill in your details.',
        'category': 'account',
    },
    {
        'id': 2,
        'question': 'How can I change my password?',
        'answer': 'Open your profile settings and use "Change password"; you will need your current password.',
        'category': 'account',
    },
    {
        'id': 3,
        'question': 'How do I pay for an order?',
        'answer': 'Orders are paid through Paystack by card, bank transfer or USSD from the order page.',
        'category': 'payments',
    },
    {
        'id': 4,
        'question': 'When does the seller receive my money?',
        'answer': 'Payments are held until the order is delivered and confirmed, then released to the seller.',
        'category': 'payments',
    },
    {
        'id': 5,
        'question': 'How long does shipping take?',
        'answer': 'Shipping typically takes 3-7 business days depending on your location and the seller.',
        'category': 'shipping',
    },
    {
        'id': 6,
        'question': 'How do I contact a seller?',
        'answer': 'Open the product page and click "Message Seller" to start a conversation.',
        'category': 'communication',
    },
]

FAQ_CATEGORIES = sorted({faq['category'] for faq in FAQS})

ARTICLES = {
    'buying-guide': {
        'title': 'Buying Guide',
        'content': (
            'Browse products or search the catalog, open a product to see its details, '
            'add it to your cart and check out. Pay for the order from the order page '
            'and follow its progress under "My orders".'
        ),
        'last_updated': '2024-01-15',
    },
    'seller-communication': {
        'title': 'Communicating with Sellers',
        'content': (
            'Use the built-in messaging to ask sellers about products, delivery options '
            'and timelines. Keep questions clear and report problems as soon as they happen.'
        ),
        'last_updated': '2024-01-10',
    },
    'returns-refunds': {
        'title': 'Returns and Refunds Policy',
        'content': (
            'Most items can be returned within 30 days of delivery if they are in their '
            'original condition with tags attached. Contact support with your order number '
            'to start a return.'
        ),
        'last_updated': '2024-01-08',
    },
}
