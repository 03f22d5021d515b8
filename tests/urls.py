"""
URL configuration for the test project.
"""
from django.urls import include, path

urlpatterns = [
    path("api/blogs/", include("devnovate.urls")),
]
