from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),

    path("api/auth/", include("accounts.urls")),
    path("api/tables/", include("tables.urls")),
    path("api/reports/", include("reports.urls")),
    path("api/", include("tokens.urls")),
]
