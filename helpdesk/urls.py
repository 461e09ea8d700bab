"""URL routes for helpdesk APIs."""

from django.urls import path

from .views import article_detail, contact_support, faq_list, help_sections

urlpatterns = [
    path('sections/', help_sections, name='help-sections'),
    path('faqs/', faq_list, name='help-faqs'),
    path('articles/<slug:topic>/', article_detail, name='help-article'),
    path('contact/', contact_support, name='help-contact'),
]
