"""Driver-name normalization.

Clients describe the same driver in many ways ("Azure DevOps Services",
"azure-devops", "VSTS", "TFS"). :func:`normalize_driver_name` collapses a raw
name to lowercase alphanumerics and maps it through :data:`DRIVER_ALIASES` to
a canonical id. Canonical ids double as the stems of the packaged instruction
documents and as cache keys.

Unknown names are returned in their collapsed form rather than rejected; they
resolve to the generic instructions further down the chain.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

GENERIC_DRIVER_ID = "generic"

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# collapsed alias -> canonical id
DRIVER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        # Azure DevOps
        "azuredevops": "azure-devops",
        "azuredevopsservices": "azure-devops",
        "azuredevopsserver": "azure-devops",
        "ado": "azure-devops",
        "vsts": "azure-devops",
        "visualstudioteamservices": "azure-devops",
        "tfs": "azure-devops",
        "teamfoundationserver": "azure-devops",
        # Salesforce
        "salesforce": "salesforce",
        "sfdc": "salesforce",
        "salesforcecom": "salesforce",
        "salesforcesalescloud": "salesforce",
        # Jira
        "jira": "jira",
        "jiracloud": "jira",
        "atlassianjira": "jira",
        # Databases
        "sqlserver": "sqlserver",
        "mssql": "sqlserver",
        "microsoftsqlserver": "sqlserver",
        "azuresql": "sqlserver",
        "postgresql": "postgresql",
        "postgres": "postgresql",
        "pgsql": "postgresql",
        "mysql": "mysql",
        "mariadb": "mysql",
        "snowflake": "snowflake",
        "bigquery": "googlebigquery",
        "googlebigquery": "googlebigquery",
        "gbq": "googlebigquery",
        # SaaS
        "hubspot": "hubspot",
        "netsuite": "netsuite",
        "oraclenetsuite": "netsuite",
        "googlesheets": "googlesheets",
        "sheets": "googlesheets",
        "sharepoint": "sharepoint",
        "sharepointonline": "sharepoint",
        "dynamics365": "dynamics365",
        "dynamicscrm": "dynamics365",
        "microsoftdynamics365": "dynamics365",
        "generic": GENERIC_DRIVER_ID,
    }
)


def collapse_driver_name(raw_name: str) -> str:
    """Lowercase ``raw_name`` and drop every non-alphanumeric character."""
    return _NON_ALNUM.sub("", raw_name.lower())


def normalize_driver_name(raw_name: str) -> str:
    """Map a client-supplied driver name to its canonical id.

    Args:
        raw_name: Driver name as given by the client; any casing or punctuation.

    Returns:
        The canonical id from :data:`DRIVER_ALIASES`, or the collapsed name
        itself when no alias matches.

    Examples:
        >>> normalize_driver_name("Azure DevOps Services")
        'azure-devops'
        >>> normalize_driver_name("vsts ")
        'azure-devops'
        >>> normalize_driver_name("Acme CRM")
        'acmecrm'
    """
    collapsed = collapse_driver_name(raw_name)
    return DRIVER_ALIASES.get(collapsed, collapsed)
