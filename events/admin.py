from django.contrib import admin

from .models import Event, Taxonomy, Term


@admin.register(Taxonomy)
class TaxonomyAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "object_types")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Term)
class TermAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "taxonomy")
    list_filter = ("taxonomy",)
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "starts_at", "ends_at")
    list_filter = ("status", "terms__taxonomy")
    search_fields = ("title",)
    filter_horizontal = ("terms",)
    prepopulated_fields = {"slug": ("title",)}
