"""Help center endpoints: sections, FAQs, articles and the support contact form."""

import logging

from django.utils import timezone
from django.utils.crypto import get_random_string
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .content import ARTICLES, FAQ_CATEGORIES, FAQS, HELP_SECTIONS
from .serializers import ContactSupportSerializer

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def help_sections(request):
    return Response(HELP_SECTIONS)


@api_view(['GET'])
@permission_classes([AllowAny])
def faq_list(request):
    """FAQs, optionally narrowed with ``?category=``."""
    category = request.query_params.get('category')
    if category:
        if category not in FAQ_CATEGORIES:
            return Response(
                {'detail': f'Unknown category. Choose from: {", ".join(FAQ_CATEGORIES)}.'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response([faq for faq in FAQS if faq['category'] == category])
    return Response(FAQS)


@api_view(['GET'])
@permission_classes([AllowAny])
def article_detail(request, topic):
    article = ARTICLES.get(topic)
    if article is None:
        return Response({'detail': 'Article not found.'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'topic': topic, **article})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def contact_support(request):
    """Accept a support request and hand back a ticket id for follow-up."""
    serializer = ContactSupportSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    submitted_at = timezone.now()
    ticket_id = f'TKT-{submitted_at:%Y%m%d}-{get_random_string(8).upper()}'
    logger.info(
        'Support request %s from user %s (%s): [%s] %s',
        ticket_id, request.user.id, data['email'], data['category'], data['subject'],
    )

    return Response({
        'detail': 'Support request submitted successfully.',
        'ticket_id': ticket_id,
        'submitted_at': submitted_at,
    }, status=status.HTTP_201_CREATED)
