# core/api/urls.py

from django.urls import path

from core.api.views import MillSettingsView

urlpatterns = [
    path("settings/", MillSettingsView.as_view(), name="mill-settings"),
]
