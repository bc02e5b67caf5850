from django.db import models
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone

EVENT_CONTENT_TYPE = "event"


def default_object_types():
    return [EVENT_CONTENT_TYPE]


class Taxonomy(models.Model):
    """A categorization axis (e.g. "event type") whose terms group content."""

    slug = models.SlugField(max_length=32, unique=True)
    name = models.CharField(max_length=100)
    object_types = models.JSONField(
        default=default_object_types,
        blank=True,
        help_text="Content types this taxonomy is registered for.",
    )

    class Meta:
        verbose_name_plural = "Taxonomies"
        ordering = ("name",)

    def __str__(self):
        return self.name

    def applies_to(self, content_type):
        return content_type in (self.object_types or [])


class Term(models.Model):
    taxonomy = models.ForeignKey(
        Taxonomy, on_delete=models.CASCADE, related_name="terms"
    )
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200)

    class Meta:
        ordering = ("name",)
        constraints = [
            models.UniqueConstraint(
                fields=["taxonomy", "slug"], name="unique_term_slug_per_taxonomy"
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.taxonomy.slug})"

    def get_absolute_url(self):
        return reverse(
            "events:term_archive",
            kwargs={"taxonomy": self.taxonomy.slug, "slug": self.slug},
        )


class EventQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=Event.Status.PUBLISHED)

    def upcoming(self, now=None):
        """Events that have not concluded yet (ongoing events included)."""
        now = now or timezone.now()
        return self.filter(
            Q(ends_at__gte=now) | Q(ends_at__isnull=True, starts_at__gte=now)
        )


class Event(models.Model):
    """A scheduled event listed in the events archive."""

    CONTENT_TYPE = EVENT_CONTENT_TYPE

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PENDING = "pending", "Pending Review"
        PUBLISHED = "published", "Published"
        PRIVATE = "private", "Private"
        TRASH = "trash", "Trash"

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField(null=True, blank=True)
    terms = models.ManyToManyField(Term, blank=True, related_name="events")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = "event"
        verbose_name_plural = "events"
        ordering = ("-starts_at",)

    def __str__(self):
        return self.title
