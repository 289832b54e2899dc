from django.urls import path
from .views import (
    TokenListCreateView,
    TokenDetailView,
    TokenAssignView,
    TokenCompleteView,
    TokenNotifyView,
    TableMatchView,
    AutoAssignView,
    CheckTimeoutsView,
    PublicQueueView,
    QueueSettingsView,
    OverrideLogListView,
)

urlpatterns = [

    # TOKENS
    path("tokens/", TokenListCreateView.as_view(), name="token-list"),
    path("tokens/match/", TableMatchView.as_view(), name="token-match"),
    path("tokens/<uuid:pk>/", TokenDetailView.as_view(), name="token-detail"),
    path("tokens/<uuid:pk>/assign/", TokenAssignView.as_view(), name="token-assign"),
    path("tokens/<uuid:pk>/complete/", TokenCompleteView.as_view(), name="token-complete"),
    path("tokens/<uuid:pk>/notify/", TokenNotifyView.as_view(), name="token-notify"),

    # QUEUE
    path("queue/auto-assign/", AutoAssignView.as_view(), name="queue-auto-assign"),
    path("queue/check-timeouts/", CheckTimeoutsView.as_view(), name="queue-check-timeouts"),
    path("queue/public/", PublicQueueView.as_view(), name="queue-public"),

    # SETTINGS / AUDIT
    path("settings/", QueueSettingsView.as_view(), name="queue-settings"),
    path("logs/", OverrideLogListView.as_view(), name="override-logs"),
]
