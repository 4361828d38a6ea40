# =============================================================================
# core/models.py - Directory and comparison data models
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum

from core.exceptions import ConfigurationError


class PrincipalType(Enum):
    """Directory principal kinds returned by member listings"""
    USER = "user"
    GROUP = "group"
    DEVICE = "device"
    SERVICE_PRINCIPAL = "servicePrincipal"
    OTHER = "other"


class ResolutionStatus(Enum):
    """Outcome of resolving a single group name"""
    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    ERROR = "error"


class ComparisonMode(Enum):
    """Output shape for the comparison report"""
    FLAG = "flag"
    SIDE_BY_SIDE = "side_by_side"


@dataclass
class Member:
    """A directory principal returned from a member listing"""
    principal_type: PrincipalType
    principal_name: str = ""
    object_id: str = ""

    @property
    def is_user(self) -> bool:
        return self.principal_type == PrincipalType.USER and bool(self.principal_name)


@dataclass
class GroupResolution:
    """Result of resolving one group name to its user members"""
    group_name: str
    status: ResolutionStatus
    members: List[Member] = field(default_factory=list)
    group_id: str = ""
    error: str = ""

    @property
    def member_names(self) -> List[str]:
        return [member.principal_name for member in self.members]


@dataclass
class FlagRow:
    """Imported member annotated with compare-group membership"""
    AllImportedMembers: str
    InCompareGroups: str = ""

    FIELDNAMES = ['AllImportedMembers', 'InCompareGroups']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'AllImportedMembers': self.AllImportedMembers,
            'InCompareGroups': self.InCompareGroups
        }


@dataclass
class SideBySideRow:
    """Independently sorted imported/compare columns placed side by side"""
    ImportedGroupMembers: str = ""
    CompareGroupMembers: str = ""

    FIELDNAMES = ['ImportedGroupMembers', 'CompareGroupMembers']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ImportedGroupMembers': self.ImportedGroupMembers,
            'CompareGroupMembers': self.CompareGroupMembers
        }


@dataclass
class GroupAssignment:
    """A group assigned to an application's service principal"""
    group_name: str
    group_id: str
    app_role_id: str = ""

    FIELDNAMES = ['GroupName', 'GroupId', 'AppRoleId']

    def to_dict(self) -> Dict[str, Any]:
        return {
            'GroupName': self.group_name,
            'GroupId': self.group_id,
            'AppRoleId': self.app_role_id
        }


@dataclass
class ComparisonConfig:
    """Explicit configuration for one comparison run"""
    input_path: str
    output_path: str
    compare_group_names: List[str]
    group_column_name: str = "GroupName"
    transitive: bool = True
    mode: ComparisonMode = ComparisonMode.FLAG
    sheet_name: Optional[str] = None

    def validate(self) -> None:
        """Raise ConfigurationError if the configuration cannot drive a run"""
        if not self.input_path:
            raise ConfigurationError("Input path is required")
        if not self.output_path:
            raise ConfigurationError("Output path is required")
        if not self.group_column_name:
            raise ConfigurationError("Group column name is required")

        names = [name for name in self.compare_group_names if name and name.strip()]
        if len(names) != 2 or len(self.compare_group_names) != 2:
            raise ConfigurationError(
                f"Exactly two compare groups are required, got {self.compare_group_names!r}"
            )


@dataclass
class ProcessingStats:
    """Statistics for one set-building pass"""
    total_groups: int = 0
    found_groups: int = 0
    not_found_groups: int = 0
    ambiguous_groups: int = 0
    error_groups: int = 0
    skipped_entries: int = 0
    duplicate_entries: int = 0
    status_counts: Dict[ResolutionStatus, int] = field(default_factory=dict)

    def record(self, status: ResolutionStatus) -> None:
        self.total_groups += 1
        self.status_counts[status] = self.status_counts.get(status, 0) + 1

        if status == ResolutionStatus.FOUND:
            self.found_groups += 1
        elif status == ResolutionStatus.NOT_FOUND:
            self.not_found_groups += 1
        elif status == ResolutionStatus.AMBIGUOUS:
            self.ambiguous_groups += 1
        elif status == ResolutionStatus.ERROR:
            self.error_groups += 1

    @property
    def success_rate(self) -> float:
        """Calculate success rate percentage"""
        if self.total_groups == 0:
            return 0.0
        return (self.found_groups / self.total_groups) * 100
