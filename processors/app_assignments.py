# =============================================================================
# processors/app_assignments.py - Groups assigned to an application
# =============================================================================

import logging
from typing import List

from core.directory_client import DirectoryClient
from core.exceptions import DirectoryError
from core.models import GroupAssignment
from utils.csv_utils import CSVHandler


class AppAssignmentProcessor:
    """Exports the groups granted access to an application"""

    GROUP_PRINCIPAL_TYPE = "Group"

    def __init__(self, client: DirectoryClient):
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_group_assignments(self, app_object_id: str) -> List[GroupAssignment]:
        """Resolve the application's service principal and list its group assignments"""
        principal = self.client.find_service_principal(app_object_id)
        if not principal:
            raise DirectoryError(f"No service principal found for application {app_object_id}")

        self.logger.info(
            f"Application {app_object_id} resolved to service principal "
            f"'{principal['displayName']}' ({principal['id']})"
        )

        assignments = []
        seen = set()
        for assignment in self.client.list_app_role_assignments(principal['id']):
            if assignment['principalType'] != self.GROUP_PRINCIPAL_TYPE:
                continue

            key = (assignment['principalId'], assignment['appRoleId'])
            if key in seen:
                continue
            seen.add(key)

            assignments.append(GroupAssignment(
                group_name=assignment['principalDisplayName'],
                group_id=assignment['principalId'],
                app_role_id=assignment['appRoleId']
            ))

        self.logger.info(f"Found {len(assignments)} group assignments")
        return assignments

    def export(self, app_object_id: str, output_path: str) -> List[GroupAssignment]:
        """Write the application's group assignments to a report"""
        assignments = self.get_group_assignments(app_object_id)
        CSVHandler.write_report(
            [assignment.to_dict() for assignment in assignments],
            output_path,
            GroupAssignment.FIELDNAMES
        )
        return assignments
