# =============================================================================
# core/graph_client.py - Microsoft Graph (Entra ID) directory client
# =============================================================================

from typing import Dict, Any, Iterable, Iterator, List, Optional

import msal
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.directory_client import DirectoryClient
from core.exceptions import DirectoryError, PrerequisiteMissingError
from core.models import Member, PrincipalType


GRAPH_API_ENDPOINT = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = ["https://graph.microsoft.com/.default"]
TOKEN_REMEDIATION = (
    "Check AZURE_TENANT_ID, AZURE_CLIENT_ID and AZURE_CLIENT_SECRET, and that the "
    "app registration has GroupMember.Read.All and Application.Read.All consent."
)

ODATA_TYPES = {
    "#microsoft.graph.user": PrincipalType.USER,
    "#microsoft.graph.group": PrincipalType.GROUP,
    "#microsoft.graph.device": PrincipalType.DEVICE,
    "#microsoft.graph.servicePrincipal": PrincipalType.SERVICE_PRINCIPAL,
}


def odata_escape(value: str) -> str:
    """Escape a literal for use inside an OData single-quoted string"""
    return value.replace("'", "''")


class GraphDirectoryClient(DirectoryClient):
    """Entra ID client using client-credential auth against Microsoft Graph"""

    def __init__(self, tenant_id: str, client_id: str, client_secret: str,
                 page_size: int = 999, timeout: int = 30):
        super().__init__()
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.page_size = page_size
        self.timeout = timeout
        self.session: Optional[requests.Session] = None

    def connect(self) -> None:
        """Acquire an app-only token and prepare an HTTP session"""
        try:
            app = msal.ConfidentialClientApplication(
                self.client_id,
                authority=f"https://login.microsoftonline.com/{self.tenant_id}",
                client_credential=self.client_secret,
            )
            result = app.acquire_token_for_client(scopes=GRAPH_SCOPE)
        except (ValueError, requests.RequestException) as e:
            self.logger.error(f"Failed to reach Microsoft identity platform: {e}")
            raise PrerequisiteMissingError(
                f"Failed to acquire Microsoft Graph token: {e}. {TOKEN_REMEDIATION}"
            ) from e

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            raise PrerequisiteMissingError(
                f"Failed to acquire Microsoft Graph token: {error}. {TOKEN_REMEDIATION}"
            )

        retry = Retry(total=3, backoff_factor=1, status_forcelist=[429, 500, 502, 503, 504],
                      allowed_methods=["GET"], respect_retry_after_header=True)
        self.session = requests.Session()
        self.session.mount("https://", HTTPAdapter(max_retries=retry))
        self.session.headers.update({
            "Authorization": f"Bearer {result['access_token']}",
            "Content-Type": "application/json",
        })
        self.logger.info("Successfully acquired Microsoft Graph token")

    def disconnect(self) -> None:
        if self.session:
            self.session.close()
            self.session = None
            self.logger.info("Closed Microsoft Graph session")

    def _paged_get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Yield every item of a collection, following @odata.nextLink"""
        if not self.session:
            raise DirectoryError("Not connected to Microsoft Graph")

        while url:
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
            except requests.RequestException as e:
                raise DirectoryError(f"Graph request failed for {url}: {e}") from e

            yield from data.get("value", [])
            url = data.get("@odata.nextLink")
            params = None  # nextLink carries the query

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """GET a single resource; None on 404"""
        if not self.session:
            raise DirectoryError("Not connected to Microsoft Graph")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise DirectoryError(f"Graph request failed for {url}: {e}") from e

    def find_groups(self, display_name: str) -> List[Dict[str, str]]:
        params = {
            "$filter": f"displayName eq '{odata_escape(display_name)}'",
            "$select": "id,displayName",
        }
        # Graph compares displayName case-insensitively; keep exact matches only
        groups = [
            {"id": group["id"], "displayName": group.get("displayName", "")}
            for group in self._paged_get(f"{GRAPH_API_ENDPOINT}/groups", params)
            if group.get("displayName") == display_name
        ]
        self.logger.debug(f"Found {len(groups)} group(s) named '{display_name}'")
        return groups

    def list_members(self, group_id: str, transitive: bool = False) -> Iterable[Member]:
        members_path = "transitiveMembers" if transitive else "members"
        url = f"{GRAPH_API_ENDPOINT}/groups/{group_id}/{members_path}"
        params = {"$select": "id,userPrincipalName", "$top": self.page_size}

        for item in self._paged_get(url, params):
            principal_type = ODATA_TYPES.get(item.get("@odata.type", ""), PrincipalType.OTHER)
            yield Member(
                principal_type=principal_type,
                principal_name=item.get("userPrincipalName") or "",
                object_id=item.get("id", ""),
            )

    def find_service_principal(self, app_object_id: str) -> Optional[Dict[str, str]]:
        application = self._get(
            f"{GRAPH_API_ENDPOINT}/applications/{app_object_id}",
            {"$select": "id,appId,displayName"},
        )
        if not application:
            self.logger.debug(f"Application {app_object_id} not found")
            return None

        params = {
            "$filter": f"appId eq '{odata_escape(application['appId'])}'",
            "$select": "id,appId,displayName",
        }
        principals = list(self._paged_get(f"{GRAPH_API_ENDPOINT}/servicePrincipals", params))
        if not principals:
            self.logger.debug(f"No service principal for appId {application['appId']}")
            return None

        principal = principals[0]
        return {
            "id": principal["id"],
            "appId": principal.get("appId", ""),
            "displayName": principal.get("displayName", ""),
        }

    def list_app_role_assignments(self, service_principal_id: str) -> Iterable[Dict[str, str]]:
        url = f"{GRAPH_API_ENDPOINT}/servicePrincipals/{service_principal_id}/appRoleAssignedTo"
        for item in self._paged_get(url, {"$top": self.page_size}):
            yield {
                "principalType": item.get("principalType", ""),
                "principalId": item.get("principalId", ""),
                "principalDisplayName": item.get("principalDisplayName", ""),
                "appRoleId": item.get("appRoleId", ""),
            }
