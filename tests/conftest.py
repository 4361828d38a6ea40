from typing import Dict, List

import pytest

from core.directory_client import DirectoryClient
from core.exceptions import DirectoryError
from core.models import Member, PrincipalType
from core.resolver import GroupResolver


def user(name: str) -> Member:
    return Member(PrincipalType.USER, name, object_id=name)


class FakeDirectoryClient(DirectoryClient):
    """In-memory directory with nested groups"""

    def __init__(self, groups: Dict[str, dict], failing: List[str] = None):
        super().__init__()
        # display name -> {"id": ..., "members": [Member|group name], ...}
        self.groups = groups
        self.failing = set(failing or [])
        self.find_calls = []
        self.member_calls = []
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def find_groups(self, display_name):
        self.find_calls.append(display_name)
        if display_name in self.failing:
            raise DirectoryError(f"lookup of {display_name} failed")
        return [
            {"id": group["id"], "displayName": name}
            for name, group in self.groups.items()
            if group.get("displayName", name) == display_name
        ]

    def _by_id(self, group_id):
        for name, group in self.groups.items():
            if group["id"] == group_id:
                return name, group
        raise DirectoryError(f"no group {group_id}")

    def list_members(self, group_id, transitive=False):
        self.member_calls.append((group_id, transitive))
        name, group = self._by_id(group_id)
        if group.get("members_fail"):
            raise DirectoryError(f"member fetch for {name} failed")

        seen = set()
        stack = list(group["members"])
        while stack:
            item = stack.pop(0)
            if isinstance(item, Member):
                yield item
                continue
            # nested group reference
            nested = self.groups[item]
            yield Member(PrincipalType.GROUP, "", object_id=nested["id"])
            if transitive and item not in seen:
                seen.add(item)
                stack.extend(nested["members"])


@pytest.fixture
def directory():
    return FakeDirectoryClient({
        "G1": {"id": "id-g1", "members": [user("a@x.com"), user("b@x.com")]},
        "G2": {"id": "id-g2", "members": [user("b@X.COM"), user("c@x.com")]},
        "Compare A": {"id": "id-ca", "members": [user("b@x.com")]},
        "Compare B": {"id": "id-cb", "members": []},
        "Outer": {"id": "id-outer", "members": [user("outer@x.com"), "Middle"]},
        "Middle": {"id": "id-middle", "members": [user("middle@x.com"), "Inner"]},
        "Inner": {"id": "id-inner", "members": [user("deep@x.com"),
                                                Member(PrincipalType.DEVICE, "", "dev-1")]},
        "Mixed": {"id": "id-mixed", "members": [
            user("person@x.com"),
            Member(PrincipalType.SERVICE_PRINCIPAL, "", "sp-1"),
            Member(PrincipalType.DEVICE, "", "dev-2"),
            Member(PrincipalType.USER, "", "no-upn"),
        ]},
        "Broken": {"id": "id-broken", "members": [], "members_fail": True},
        "Dup 1": {"id": "id-dup1", "displayName": "Dup", "members": [user("d1@x.com")]},
        "Dup 2": {"id": "id-dup2", "displayName": "Dup", "members": [user("d2@x.com")]},
    }, failing=["Flaky"])


@pytest.fixture
def resolver(directory):
    return GroupResolver(directory)
