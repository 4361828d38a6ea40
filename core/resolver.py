# =============================================================================
# core/resolver.py - Group name to user member resolution
# =============================================================================

import logging

from core.directory_client import DirectoryClient
from core.exceptions import DirectoryError
from core.models import GroupResolution, ResolutionStatus


class GroupResolver:
    """Resolves a group display name to its user members"""

    def __init__(self, client: DirectoryClient):
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve(self, group_name: str, transitive: bool = False) -> GroupResolution:
        """
        Look up a group by exact display name and list its user members.

        Lookup or fetch failures are reported through the returned status
        rather than raised, so callers can continue with remaining groups.

        Args:
            group_name: Group display name
            transitive: Include members inherited through nested groups

        Returns:
            GroupResolution with status and user members (empty unless FOUND)
        """
        name = group_name.strip()

        try:
            matches = self.client.find_groups(name)
        except DirectoryError as e:
            self.logger.error(f"Error looking up group '{name}': {e}")
            return GroupResolution(name, ResolutionStatus.ERROR, error=str(e))
        except Exception as e:
            self.logger.error(f"Unexpected error looking up group '{name}': {e!r}")
            return GroupResolution(name, ResolutionStatus.ERROR, error=str(e))

        if not matches:
            self.logger.debug(f"Group '{name}' not found in directory")
            return GroupResolution(name, ResolutionStatus.NOT_FOUND)

        if len(matches) > 1:
            ids = ", ".join(sorted(match['id'] for match in matches))
            self.logger.debug(f"Group '{name}' matches {len(matches)} groups: {ids}")
            return GroupResolution(
                name, ResolutionStatus.AMBIGUOUS,
                error=f"Multiple groups share this display name. Candidate IDs: {ids}"
            )

        group_id = matches[0]['id']

        try:
            members = [member for member in self.client.list_members(group_id, transitive)
                       if member.is_user]
        except Exception as e:
            self.logger.error(f"Error fetching members of group '{name}' ({group_id}): {e}")
            return GroupResolution(name, ResolutionStatus.ERROR, group_id=group_id, error=str(e))

        scope = "transitive" if transitive else "direct"
        self.logger.debug(f"Group '{name}' ({group_id}) has {len(members)} {scope} user members")
        return GroupResolution(name, ResolutionStatus.FOUND, members=members, group_id=group_id)
