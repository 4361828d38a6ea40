# =============================================================================
# processors/set_builder.py - Accumulate members across many groups
# =============================================================================

import logging
from typing import Dict, Iterable, Optional

from core.member_set import MemberSet
from core.models import GroupResolution, ProcessingStats, ResolutionStatus
from core.resolver import GroupResolver


class MemberSetBuilder:
    """Resolves a list of group names into one deduplicated member set"""

    def __init__(self, resolver: GroupResolver, label: str = "groups"):
        self.resolver = resolver
        self.label = label
        self.stats = ProcessingStats()
        self.resolutions: Dict[str, GroupResolution] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_set(self, group_names: Iterable[Optional[str]], transitive: bool = False) -> MemberSet:
        """Resolve each group name and merge the user members into a MemberSet"""
        members = MemberSet()

        for group_name in group_names:
            if self.should_skip(group_name):
                self.stats.skipped_entries += 1
                continue

            name = str(group_name).strip()
            if name in self.resolutions:
                self.logger.debug(f"Group '{name}' already resolved, skipping duplicate entry")
                self.stats.duplicate_entries += 1
                continue

            resolution = self.resolver.resolve(name, transitive)
            self.resolutions[name] = resolution
            self.stats.record(resolution.status)

            if resolution.status == ResolutionStatus.FOUND:
                added = members.update(resolution.member_names)
                self.logger.info(
                    f"Group '{name}': {len(resolution.members)} members, {added} new"
                )
            else:
                self.report_unresolved(resolution)

        self.logger.info(f"Built {self.label} set with {len(members)} unique members")
        return members

    @staticmethod
    def should_skip(group_name) -> bool:
        """Skip None, blank, and NaN entries from the input list"""
        if group_name is None:
            return True
        # pandas fills empty spreadsheet cells with float NaN
        if isinstance(group_name, float) and group_name != group_name:
            return True
        return not str(group_name).strip()

    def report_unresolved(self, resolution: GroupResolution) -> None:
        if resolution.status == ResolutionStatus.NOT_FOUND:
            self.logger.warning(f"Group '{resolution.group_name}' not found, contributes no members")
        elif resolution.status == ResolutionStatus.AMBIGUOUS:
            self.logger.warning(
                f"Group '{resolution.group_name}' is ambiguous, contributes no members. {resolution.error}"
            )
        else:
            self.logger.warning(
                f"Group '{resolution.group_name}' could not be resolved, contributes no members: "
                f"{resolution.error}"
            )

    def log_statistics(self) -> None:
        """Log set-building statistics"""
        status_counts = {status.value: count for status, count in self.stats.status_counts.items()}
        self.logger.info(f"{self.label.capitalize()} resolution summary: {status_counts}")
        self.logger.info(
            f"{self.label.capitalize()} success rate: {self.stats.success_rate:.1f}% "
            f"({self.stats.found_groups}/{self.stats.total_groups}), "
            f"skipped {self.stats.skipped_entries} blank, {self.stats.duplicate_entries} duplicate"
        )
