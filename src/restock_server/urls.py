from django.urls import path

from . import views

app_name = "restock_server"

urlpatterns = [
    path("health/", views.health, name="health"),
    path("stock/", views.stock, name="stock"),
    path("force-restock/", views.force_restock, name="force_restock"),
    path("set-timer/", views.set_timer, name="set_timer"),
    path("set-stock/", views.set_stock, name="set_stock"),
    path("listen-for-restock/", views.listen_for_restock, name="listen_for_restock"),
]
