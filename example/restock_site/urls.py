from django.urls import include, path

urlpatterns = [
    path("", include("restock_server.urls")),
]
