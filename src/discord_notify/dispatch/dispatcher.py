from __future__ import annotations
import logging

from discord_notify.dispatch.client import DiscordClient
from discord_notify.models import DispatchMode, ResolvedConfig

logger = logging.getLogger(__name__)

def dispatch(mode: DispatchMode, config: ResolvedConfig, content: str, session=None) -> None:
    """Send ``content`` once, raising the first DispatchError hit.

    CHANNEL posts straight to ``config.channel_or_user_id``. DIRECT_MESSAGE
    treats it as a recipient, opens the DM channel, then posts to the id the
    API hands back. Nothing is retried.
    """
    client = DiscordClient(config.token, session=session)
    try:
        if mode is DispatchMode.DIRECT_MESSAGE:
            channel_id = client.open_dm_channel(config.channel_or_user_id)
            logger.debug(f"Opened DM channel {channel_id} for {config.channel_or_user_id}")
        else:
            channel_id = config.channel_or_user_id

        client.post_message(channel_id, content)
        logger.info(f"Posted message to channel {channel_id}")
    finally:
        if session is None:
            client.close()
