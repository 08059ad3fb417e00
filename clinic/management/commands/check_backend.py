from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from clinic.views.health import ping_backend
from clinic.services.envelope import error_message


class Command(BaseCommand):
    help = "Check that the hosted backend is reachable with the configured credentials."

    def handle(self, *args, **options):
        try:
            async_to_sync(ping_backend)()
        except Exception as e:
            raise CommandError(f"backend unreachable: {error_message(e)}")
        self.stdout.write(self.style.SUCCESS("backend reachable"))
