# =============================================================================
# core/ad_client.py - On-premises Active Directory client
# =============================================================================

from typing import Dict, Any, Iterable, List, Optional

from ldap3 import Server, Connection, ALL, SUBTREE
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from core.directory_client import DirectoryClient
from core.exceptions import DirectoryError, PrerequisiteMissingError
from core.models import Member, PrincipalType

# LDAP_MATCHING_RULE_IN_CHAIN walks nested memberOf links server-side
IN_CHAIN_RULE = "1.2.840.113556.1.4.1941"


class ActiveDirectoryClient(DirectoryClient):
    """Active Directory client using LDAP paged searches"""

    MEMBER_ATTRIBUTES = ['objectClass', 'userPrincipalName', 'objectGUID']

    def __init__(self, server_url: str, username: str, password: str, base_dn: str,
                 page_size: int = 500):
        super().__init__()
        self.server_url = server_url
        self.username = username
        self.password = password
        self.base_dn = base_dn
        self.page_size = page_size
        self.connection: Optional[Connection] = None

    def connect(self) -> None:
        """Establish connection to Active Directory"""
        try:
            server = Server(self.server_url, get_info=ALL)
            self.connection = Connection(
                server,
                user=self.username,
                password=self.password,
                auto_bind=True
            )
            self.logger.info("Successfully connected to Active Directory")
        except LDAPException as e:
            self.logger.error(f"Failed to connect to AD: {e}")
            raise PrerequisiteMissingError(
                f"Could not bind to {self.server_url}: {e}. "
                f"Check AD_SERVER, AD_USERNAME and AD_PASSWORD."
            ) from e

    def disconnect(self) -> None:
        """Close Active Directory connection"""
        if self.connection:
            self.connection.unbind()
            self.connection = None
            self.logger.info("Disconnected from Active Directory")

    def _search(self, search_filter: str, attributes: List[str]) -> Iterable[Dict[str, Any]]:
        """Run a paged subtree search, yielding result entries only"""
        if not self.connection:
            raise DirectoryError("Not connected to Active Directory")

        try:
            results = self.connection.extend.standard.paged_search(
                search_base=self.base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=attributes,
                paged_size=self.page_size,
                generator=True
            )
            for entry in results:
                if entry.get('type') == 'searchResEntry':
                    yield entry
        except LDAPException as e:
            raise DirectoryError(f"LDAP search {search_filter} failed: {e}") from e

    def find_groups(self, display_name: str) -> List[Dict[str, str]]:
        search_filter = f"(&(objectClass=group)(displayName={escape_filter_chars(display_name)}))"
        groups = []
        for entry in self._search(search_filter, ['displayName']):
            name = self._first_value(entry['attributes'].get('displayName'))
            # directory string matching ignores case; keep exact matches only
            if name != display_name:
                continue
            groups.append({'id': entry['dn'], 'displayName': name})

        self.logger.debug(f"Found {len(groups)} group(s) named '{display_name}'")
        return groups

    def list_members(self, group_id: str, transitive: bool = False) -> Iterable[Member]:
        """
        Yield principals whose memberOf (or its nested chain) names the group.

        Users whose primary group is this group are not returned: AD records
        that link through primaryGroupID rather than the member attribute.
        """
        group_dn = escape_filter_chars(group_id)
        if transitive:
            search_filter = f"(memberOf:{IN_CHAIN_RULE}:={group_dn})"
        else:
            search_filter = f"(memberOf={group_dn})"

        for entry in self._search(search_filter, self.MEMBER_ATTRIBUTES):
            attributes = entry['attributes']
            yield Member(
                principal_type=self._principal_type(attributes.get('objectClass') or []),
                principal_name=self._first_value(attributes.get('userPrincipalName')),
                object_id=str(self._first_value(attributes.get('objectGUID')) or entry['dn'])
            )

    @staticmethod
    def _principal_type(object_classes: List[str]) -> PrincipalType:
        """Map objectClass values to a principal type"""
        classes = {value.lower() for value in object_classes}
        # computer objects also carry the user class
        if 'computer' in classes:
            return PrincipalType.DEVICE
        if 'group' in classes:
            return PrincipalType.GROUP
        if 'user' in classes:
            return PrincipalType.USER
        return PrincipalType.OTHER

    @staticmethod
    def _first_value(value) -> str:
        if isinstance(value, (list, tuple)):
            return str(value[0]) if value else ""
        return str(value) if value else ""
