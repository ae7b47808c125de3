from django.urls import path

from . import views


app_name = "appearance"

urlpatterns = [
    path("config/", views.egg_config, name="egg_config"),
    path("sounds/", views.sounds, name="sounds"),
    path("admin/config/", views.update_config, name="update_config"),
    path(
        "admin/sounds/<int:sound_id>/activate/",
        views.activate,
        name="activate_sound",
    ),
]
