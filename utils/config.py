# =============================================================================
# utils/config.py - Configuration management
# =============================================================================

import os
from typing import Optional, List

from dotenv import load_dotenv

from core.models import ComparisonConfig, ComparisonMode
from core.exceptions import ConfigurationError

BACKEND_GRAPH = "graph"
BACKEND_LDAP = "ldap"


class Config:
    """Configuration management"""

    def __init__(self):
        load_dotenv()

    @property
    def directory_backend(self) -> str:
        return os.getenv("DIRECTORY_BACKEND", BACKEND_GRAPH).strip().lower()

    # Microsoft Graph (Entra ID)
    @property
    def tenant_id(self) -> Optional[str]:
        return os.getenv("AZURE_TENANT_ID")

    @property
    def client_id(self) -> Optional[str]:
        return os.getenv("AZURE_CLIENT_ID")

    @property
    def client_secret(self) -> Optional[str]:
        return os.getenv("AZURE_CLIENT_SECRET")

    # On-premises Active Directory
    @property
    def ad_server(self) -> Optional[str]:
        return os.getenv("AD_SERVER")

    @property
    def ad_username(self) -> Optional[str]:
        return os.getenv("AD_USERNAME")

    @property
    def ad_password(self) -> Optional[str]:
        return os.getenv("AD_PASSWORD")

    @property
    def base_dn(self) -> Optional[str]:
        return os.getenv("BASE_DN")

    # Comparison defaults
    @property
    def input_path(self) -> Optional[str]:
        return os.getenv("INPUT_PATH")

    @property
    def output_path(self) -> Optional[str]:
        return os.getenv("OUTPUT_PATH")

    @property
    def group_column_name(self) -> str:
        return os.getenv("GROUP_COLUMN_NAME", "GroupName")

    @property
    def compare_groups(self) -> List[str]:
        raw = os.getenv("COMPARE_GROUPS", "")
        return [name.strip() for name in raw.split(",") if name.strip()]

    @property
    def transitive(self) -> bool:
        return os.getenv("TRANSITIVE", "true").strip().lower() in ("1", "true", "yes", "on")

    @property
    def comparison_mode(self) -> str:
        return os.getenv("COMPARISON_MODE", ComparisonMode.FLAG.value).strip().lower()

    def _directory_vars(self):
        if self.directory_backend == BACKEND_LDAP:
            return [
                (self.ad_server, "AD_SERVER"),
                (self.ad_username, "AD_USERNAME"),
                (self.ad_password, "AD_PASSWORD"),
                (self.base_dn, "BASE_DN")
            ]
        return [
            (self.tenant_id, "AZURE_TENANT_ID"),
            (self.client_id, "AZURE_CLIENT_ID"),
            (self.client_secret, "AZURE_CLIENT_SECRET")
        ]

    def validate_directory_config(self) -> bool:
        """Validate that all required directory configuration is present"""
        if self.directory_backend not in (BACKEND_GRAPH, BACKEND_LDAP):
            return False
        return all(var for var, _ in self._directory_vars())

    def get_missing_directory_vars(self) -> List[str]:
        """Get list of missing directory configuration variables"""
        if self.directory_backend not in (BACKEND_GRAPH, BACKEND_LDAP):
            return ["DIRECTORY_BACKEND"]
        return [name for var, name in self._directory_vars() if not var]

    def build_comparison_config(self, input_path: Optional[str] = None,
                                output_path: Optional[str] = None,
                                group_column_name: Optional[str] = None,
                                compare_group_names: Optional[List[str]] = None,
                                transitive: Optional[bool] = None,
                                mode: Optional[str] = None,
                                sheet_name: Optional[str] = None) -> ComparisonConfig:
        """Build a ComparisonConfig from CLI overrides falling back to the environment"""
        mode_value = mode or self.comparison_mode
        try:
            comparison_mode = ComparisonMode(mode_value)
        except ValueError as e:
            valid = [m.value for m in ComparisonMode]
            raise ConfigurationError(f"Unknown comparison mode '{mode_value}', expected one of {valid}") from e

        config = ComparisonConfig(
            input_path=input_path or self.input_path or "",
            output_path=output_path or self.output_path or "",
            compare_group_names=list(compare_group_names) if compare_group_names else self.compare_groups,
            group_column_name=group_column_name or self.group_column_name,
            transitive=self.transitive if transitive is None else transitive,
            mode=comparison_mode,
            sheet_name=sheet_name
        )
        config.validate()
        return config
