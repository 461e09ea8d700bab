"""URL routes for messaging APIs."""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ConversationViewSet

router = DefaultRouter()
router.register(r'conversations', ConversationViewSet, basename='conversation')

urlpatterns = [
    path('sellers/', ConversationViewSet.as_view({'get': 'sellers'}), name='message-sellers'),
    path('', include(router.urls)),
]
