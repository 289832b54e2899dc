from django.urls import path
from .views import (
    TableListCreateView,
    TableDetailView,
)

urlpatterns = [

    path("", TableListCreateView.as_view(), name="table-list"),

    path("<uuid:pk>/", TableDetailView.as_view(), name="table-detail"),
]
