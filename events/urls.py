from django.urls import path

from . import views

urlpatterns = [
    path("", views.EventArchiveView.as_view(), name="archive"),
    path(
        "<slug:taxonomy>/<slug:slug>/",
        views.TermArchiveView.as_view(),
        name="term_archive",
    ),
]
