from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.management.base import BaseCommand
from django.utils import timezone

from clinic.backend import get_client_factory
from clinic.realtime.consumers import UPDATES_GROUP
from clinic.services import cache as service_cache
from clinic.services.provider_dashboard import get_provider_stats
from clinic.services.providers import get_provider_rating


class Command(BaseCommand):
    help = "Warm cached provider statistics and ratings; broadcast a WebSocket refresh event."

    def add_arguments(self, parser):
        parser.add_argument("provider_ids", nargs="+", help="provider account ids to refresh")

    def handle(self, *args, **options):
        now = timezone.now()

        async def refresh(provider_ids):
            client = await get_client_factory()()
            refreshed, failed = [], []
            for pid in provider_ids:
                for key, ttl, service in (
                    (service_cache.provider_stats_key(pid), service_cache.TTL_MEDIUM, get_provider_stats),
                    (service_cache.provider_rating_key(pid), service_cache.TTL_LONG, get_provider_rating),
                ):
                    await service_cache.invalidate(key)
                    result = await service_cache.cached(key, ttl, lambda: service(client, pid))
                    (refreshed if result["success"] else failed).append((key, result.get("error")))
            return refreshed, failed

        refreshed, failed = async_to_sync(refresh)(options["provider_ids"])
        for key, error in failed:
            self.stderr.write(self.style.WARNING(f"failed: {key}: {error}"))

        # Broadcast WebSocket message
        channel_layer = get_channel_layer()
        if channel_layer is not None and refreshed:
            event = {"type": "broadcast.refresh", "ts": now.isoformat(), "keys": [k for k, _ in refreshed][:50]}
            async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)

        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(refreshed)} keys at {now}"))
