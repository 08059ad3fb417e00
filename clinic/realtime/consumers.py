"""
WebSocket relay of backend row changes to a signed-in mobile client.

The client connects to ``ws/notifications?token=<access token>``.  After
the token is checked against the backend, the consumer opens realtime
subscriptions for the caller's new notifications and incoming messages
and forwards each changed row as ``{"type": "notification"|"message",
"data": row}``.  Cache refresh broadcasts from ``refresh_caches`` are
forwarded as well.
"""
import asyncio
import json
import logging
from urllib.parse import parse_qs

from channels.generic.websocket import AsyncWebsocketConsumer

from clinic.authentication import resolve_identity
from clinic.backend import get_client_factory
from clinic.services import realtime

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"

# App close codes: 4401 unauthenticated
CLOSE_UNAUTHENTICATED = 4401


def query_token(scope) -> str:
    params = parse_qs((scope.get("query_string") or b"").decode())
    return (params.get("token") or [""])[0]


class NotificationsConsumer(AsyncWebsocketConsumer):
    async def connect(self):
        self.subscriptions = []
        self.pending = set()
        token = query_token(self.scope)
        if not token:
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        identity = await resolve_identity(token)
        user = identity.get("user") if identity.get("success") else None
        if user is None:
            logger.info("websocket rejected: %s", identity.get("error"))
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        self.client = await get_client_factory()(access_token=token)
        for kind, subscribe in (
            ("notification", realtime.subscribe_to_notifications),
            ("message", realtime.subscribe_to_messages),
        ):
            result = await subscribe(self.client, user.id, self.forwarder(kind))
            if result["success"]:
                self.subscriptions.append(result["channel"])
            else:
                logger.warning("%s subscription for %s failed: %s", kind, user.id, result["error"])

        await self.channel_layer.group_add(UPDATES_GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "userId": user.id}))

    async def disconnect(self, close_code):
        for channel in self.subscriptions:
            await realtime.unsubscribe(self.client, channel)
        self.subscriptions = []
        await self.channel_layer.group_discard(UPDATES_GROUP, self.channel_name)

    def forwarder(self, kind: str):
        # realtime callbacks are plain functions running on the event loop
        def forward(row):
            task = asyncio.ensure_future(self.send(json.dumps({"type": kind, "data": row}, default=str)))
            self.pending.add(task)
            task.add_done_callback(self.pending.discard)
        return forward

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))
