from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("prize.urls")),
    path("api/", include("appearance.urls")),
]
