"""
URL configuration for the subscriptions API.

Routes:
    /posts/            - List or check (GET) / subscribe (POST)
    /posts/{author}/   - Unsubscribe (DELETE)
"""

from rest_framework.routers import DefaultRouter

from subscriptions.views import PostSubscriptionViewSet

router = DefaultRouter()
router.register(r"posts", PostSubscriptionViewSet, basename="post-subscription")

app_name = "subscriptions"
urlpatterns = router.urls
