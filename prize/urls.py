from django.urls import path

from . import views


app_name = "prize"

urlpatterns = [
    path("draw/", views.draw, name="draw"),
    path("prizes/", views.list_prizes, name="list_prizes"),
    path("prizes/pool/", views.list_prizes, name="prize_pool"),
    path("admin/login/", views.admin_login, name="admin_login"),
    path("admin/logout/", views.admin_logout, name="admin_logout"),
    path("admin/records/", views.list_records, name="list_records"),
    path("admin/stats/", views.stats, name="stats"),
]
