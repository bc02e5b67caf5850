from django.core.management.base import BaseCommand

from magic_menu.services import get_menu_cache


class Command(BaseCommand):
    help = "Clear all magic menu caches (upcoming events and term counts)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--warm",
            action="store_true",
            help="Recompute the upcoming events snapshot after clearing.",
        )

    def handle(self, *args, **options):
        cache = get_menu_cache()
        cache.clear_all_caches()
        if not options["warm"]:
            self.stdout.write(self.style.SUCCESS("Magic menu caches cleared."))
            return

        events = cache.get_upcoming_events()
        self.stdout.write(self.style.SUCCESS(
            f"Magic menu caches cleared. {len(events)} upcoming event(s) cached."
        ))
