from django.shortcuts import get_object_or_404
from django.views.generic import ListView

from .models import Event, Term


class EventArchiveView(ListView):
    """Published events that have not concluded yet, soonest first."""

    template_name = "events/event_list.html"
    context_object_name = "events"

    def get_queryset(self):
        return Event.objects.published().upcoming().order_by("starts_at")


class TermArchiveView(EventArchiveView):
    def get_queryset(self):
        self.term = get_object_or_404(
            Term.objects.select_related("taxonomy"),
            taxonomy__slug=self.kwargs["taxonomy"],
            slug=self.kwargs["slug"],
        )
        return super().get_queryset().filter(terms=self.term)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["term"] = self.term
        return context
