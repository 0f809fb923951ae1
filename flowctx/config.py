"""Configuration of the MDC property names used by the logging context.

Each :class:`ContextRole` maps to the MDC key it is published under. A blank
or missing name disables the role. Defaults match the engine's usual
settings, with the business key disabled.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum

from .values import is_not_blank


class ContextRole(Enum):
    """Contextual fields a logging context can publish."""

    ACTIVITY_ID = "activity_id"
    APPLICATION_NAME = "application_name"
    BUSINESS_KEY = "business_key"
    PROCESS_DEFINITION_ID = "process_definition_id"
    PROCESS_INSTANCE_ID = "process_instance_id"
    TENANT_ID = "tenant_id"


# engine setting names, accepted by from_mapping
_SETTING_NAMES: dict[str, ContextRole] = {
    "loggingContextActivityId": ContextRole.ACTIVITY_ID,
    "loggingContextApplicationName": ContextRole.APPLICATION_NAME,
    "loggingContextBusinessKey": ContextRole.BUSINESS_KEY,
    "loggingContextProcessDefinitionId": ContextRole.PROCESS_DEFINITION_ID,
    "loggingContextProcessInstanceId": ContextRole.PROCESS_INSTANCE_ID,
    "loggingContextTenantId": ContextRole.TENANT_ID,
}

ENV_PREFIX = "FLOWCTX_LOGGING_CONTEXT_"


@dataclass(frozen=True)
class LoggingContextConfig:
    """MDC key per contextual role; ``None`` or blank disables the role."""

    activity_id: str | None = "activityId"
    application_name: str | None = "applicationName"
    business_key: str | None = None
    process_definition_id: str | None = "processDefinitionId"
    process_instance_id: str | None = "processInstanceId"
    tenant_id: str | None = "tenantId"

    @classmethod
    def disabled(cls) -> "LoggingContextConfig":
        """A configuration with every role disabled."""
        return cls(**{f.name: None for f in fields(cls)})

    @classmethod
    def from_mapping(cls, settings: Mapping[str, object]) -> "LoggingContextConfig":
        """
        Build a configuration from a settings mapping.

        Keys may be role names (``"tenant_id"``) or engine setting names
        (``"loggingContextTenantId"``). Unknown keys are ignored, missing
        roles keep their defaults and non-string values disable the role.

        Args:
            settings: Mapping of setting name to MDC key.

        Returns:
            The resulting :class:`LoggingContextConfig`.
        """
        role_names = {role.value: role for role in ContextRole}
        overrides: dict[str, str | None] = {}
        for key, value in settings.items():
            role = role_names.get(key) or _SETTING_NAMES.get(key)
            if role is None:
                continue
            overrides[role.value] = value if isinstance(value, str) else None
        return cls(**overrides)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> "LoggingContextConfig":
        """
        Build a configuration from environment variables.

        ``FLOWCTX_LOGGING_CONTEXT_TENANT_ID=tenant`` publishes the tenant id
        as ``tenant``; an empty variable disables the role.
        """
        environ = os.environ if environ is None else environ
        settings = {
            role.value: environ[prefix + role.value.upper()]
            for role in ContextRole
            if prefix + role.value.upper() in environ
        }
        return cls.from_mapping(settings)

    def name_for(self, role: ContextRole) -> str | None:
        """Return the MDC key of ``role``, or ``None`` when disabled."""
        name = getattr(self, role.value)
        return name if is_not_blank(name) else None

    def active_roles(self) -> list[ContextRole]:
        return [role for role in ContextRole if self.name_for(role) is not None]
