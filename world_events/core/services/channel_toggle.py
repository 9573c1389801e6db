"""
Channel Presentation Toggle for the world events engine.

Applies a batch of channel renames (e.g. the Blood Moon townhall names and
their defaults). The batch is deliberately not transactional: every channel is
resolved, checked and renamed on its own, and its outcome recorded in the
returned ToggleResult.
"""

from typing import Dict

from ..interfaces import (
    ChannelDirectory,
    ChannelNotFoundError,
    ChannelPermissionError,
    TransientExternalError,
)
from ..models import RenameOutcome, ToggleResult
from world_events.utils import get_logger

logger = get_logger("channel_toggle")


class ChannelPresentationToggle:
    """
    Renames channels in bulk, tolerating per-channel failure.
    """

    def __init__(self, directory: ChannelDirectory):
        """
        Initialize the toggle.

        Args:
            directory: Resolves channel ids to renameable handles
        """
        self.directory = directory

    async def apply(self, mapping: Dict[str, str]) -> ToggleResult:
        """
        Rename each channel in ``mapping`` to its target name.

        Channels already showing the target name are skipped without an
        external call.

        Args:
            mapping: channel id -> new display name

        Returns:
            ToggleResult with one outcome per channel
        """
        result = ToggleResult()

        for channel_id, new_name in mapping.items():
            if not channel_id:
                continue
            outcome, error = await self._apply_one(str(channel_id), new_name)
            result.record(str(channel_id), outcome, error)

        if result.renamed:
            logger.info(f"Renamed {len(result.renamed)} channel(s)")
        if result.failed:
            logger.warning(
                f"{len(result.failed)} of {len(result)} channel rename(s) failed: "
                f"{sorted(result.failed)}"
            )
        return result

    async def _apply_one(self, channel_id: str, new_name: str):
        try:
            handle = await self.directory.fetch(channel_id)
        except ChannelNotFoundError as e:
            logger.error(f"Channel {channel_id} not found: {e}")
            return RenameOutcome.NOT_FOUND, str(e)
        except ChannelPermissionError as e:
            logger.error(f"Missing permissions for channel {channel_id}: {e}")
            return RenameOutcome.PERMISSION_DENIED, str(e)
        except TransientExternalError as e:
            logger.error(f"Error accessing channel {channel_id}: {e}")
            return RenameOutcome.TRANSIENT_ERROR, str(e)
        except Exception as e:
            logger.exception(f"Unexpected error fetching channel {channel_id}")
            return RenameOutcome.TRANSIENT_ERROR, str(e)

        if not handle.can_rename():
            logger.error(f"Bot lacks 'Manage Channels' permission for channel {handle.name}")
            return RenameOutcome.PERMISSION_DENIED, "missing manage channels permission"

        if handle.name == new_name:
            return RenameOutcome.UNCHANGED, None

        try:
            await handle.rename(new_name)
        except ChannelPermissionError as e:
            logger.error(f"Permission denied renaming channel {channel_id}: {e}")
            return RenameOutcome.PERMISSION_DENIED, str(e)
        except ChannelNotFoundError as e:
            logger.error(f"Channel {channel_id} vanished before rename: {e}")
            return RenameOutcome.NOT_FOUND, str(e)
        except Exception as e:
            logger.error(f"Failed to rename channel {channel_id}: {e}")
            return RenameOutcome.TRANSIENT_ERROR, str(e)

        logger.debug(f"Renamed channel {channel_id} to {new_name!r}")
        return RenameOutcome.RENAMED, None
