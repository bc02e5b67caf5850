from django.apps import AppConfig


class MagicMenuConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "magic_menu"
    verbose_name = "Magic Menu"

    def ready(self):
        import magic_menu.signals  # noqa: F401
