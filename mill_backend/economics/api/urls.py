# economics/api/urls.py

from django.urls import path

from economics.api.views import MillEconomicsReportView

urlpatterns = [
    path("mill-economics/", MillEconomicsReportView.as_view(), name="mill-economics-report"),
]
