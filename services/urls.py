from django.urls import include, path
from rest_framework.routers import DefaultRouter

from songs import router as songs_router

from . import router as services_router

router = DefaultRouter()
services_router.register(router)
songs_router.register(router)

urlpatterns = [
    path("", include(router.urls)),
]
