"""
Subscription service: channel/subscriber pairs.
"""
from typing import Any, Dict, List

from ..models import Subscription, User
from . import queries
from .base_service import BaseService
from .toggle import toggle_pair
from .validators import get_or_404, parse_object_id


class SubscriptionService(BaseService):

    async def toggle_subscription(self, channel_id: Any, requester: User) -> bool:
        """Subscribe to or unsubscribe from a channel. True means subscribed."""
        channel_uuid = parse_object_id(channel_id, "channel")
        await get_or_404(self.db, User, channel_uuid, "channel")
        return await toggle_pair(
            self.db, Subscription,
            {"channel_id": channel_uuid, "subscriber_id": requester.id}
        )

    async def get_channel_subscribers(self, channel_id: Any) -> List[Dict[str, Any]]:
        channel_uuid = parse_object_id(channel_id, "channel")
        await get_or_404(self.db, User, channel_uuid, "channel")

        rows = (await self.db.execute(queries.channel_subscribers_query(channel_uuid))).mappings().all()
        return [queries.subscription_row(row, "subscriber") for row in rows]

    async def get_subscribed_channels(self, subscriber_id: Any) -> List[Dict[str, Any]]:
        subscriber_uuid = parse_object_id(subscriber_id, "subscriber")
        await get_or_404(self.db, User, subscriber_uuid, "subscriber")

        rows = (await self.db.execute(queries.subscribed_channels_query(subscriber_uuid))).mappings().all()
        return [queries.subscription_row(row, "channel") for row in rows]
