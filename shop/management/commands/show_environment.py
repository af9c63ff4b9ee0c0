from django.core.management.base import BaseCommand

from core.class_loading import class_path
from shop.services import get_environment


class Command(BaseCommand):
    help = "List every preference set in the shop environment and the classes registered in it."

    def add_arguments(self, parser):
        parser.add_argument(
            "--names",
            action="store_true",
            help="Print dotted paths without importing the registered classes.",
        )

    def handle(self, *args, **options):
        environment = get_environment()
        for set_name in environment.set_names():
            preference_set = environment.lookup(set_name)
            self.stdout.write(self.style.MIGRATE_HEADING(set_name))
            if not preference_set:
                self.stdout.write("  (empty)")
                continue
            if options["names"]:
                members = preference_set.names()
            else:
                members = [class_path(cls) for cls in preference_set.to_sequence()]
            for member in members:
                self.stdout.write(f"  {member}")
