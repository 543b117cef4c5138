from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("donors/", include("donors.urls")),
    path("", RedirectView.as_view(pattern_name="donors:register", permanent=False)),
]

handler404 = "bloodbank.views.error_404_view"
