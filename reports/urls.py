from django.urls import path
from .views import AnalyticsReportView, DashboardSummaryView

urlpatterns = [

    path("analytics/", AnalyticsReportView.as_view(), name="analytics-report"),
    path("dashboard/", DashboardSummaryView.as_view(), name="dashboard-summary"),

]
