"""Tests for the logging context projected into the diagnostic store."""

from unittest.mock import MagicMock

import pytest

from flowctx.config import ContextRole, LoggingContextConfig
from flowctx.execution import ExecutionSnapshot, application_scope
from flowctx.mdc import MDC
from flowctx.projection import LoggingProjection
from flowctx.telemetry import OTelLogger


def activity(activity_id):
    return ExecutionSnapshot(activity_id=activity_id)


class TestActivityOnly:
    """Only the activity id role is configured."""

    def test_push_pop_scenario(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)

        assert projection.push_section(activity("task1")) is True
        assert projection.get_latest_property_value("activityId") == "task1"
        assert store.entries == {"activityId": "task1"}

        assert projection.push_section(activity("task1")) is False

        assert projection.push_section(activity("task2")) is True
        assert store.entries == {"activityId": "task2"}

        projection.pop_section()
        assert projection.get_latest_property_value("activityId") == "task1"
        assert store.entries == {"activityId": "task1"}

        projection.pop_section()
        assert projection.get_latest_property_value("activityId") is None
        assert store.entries == {}

    def test_only_active_names_are_written(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)
        projection.push_section(
            ExecutionSnapshot(activity_id="task1", tenant_id="t", business_key="bk")
        )
        assert projection.property_names == ("activityId",)
        assert {call[1] for call in store.calls} == {"activityId"}


class TestDisabled:

    def test_every_operation_is_noop(self, store, execution):
        projection = LoggingProjection(
            LoggingContextConfig.disabled(),
            store=store,
            application_resolver=lambda: "app",
        )

        assert projection.is_enabled is False
        assert projection.push_section(execution) is False
        assert projection.push_section(activity("other")) is False
        assert projection.fetch_current_context() is False
        projection.pop_section()
        projection.sync_all()
        projection.clear_external_context()

        assert store.calls == []
        assert projection.section_count == 0

    def test_blank_names_disable_roles(self, store):
        config = LoggingContextConfig(
            activity_id="  ",
            application_name="",
            process_definition_id=None,
            process_instance_id="\t",
            tenant_id="",
        )
        projection = LoggingProjection(config, store=store)
        assert projection.push_section(activity("task1")) is False
        assert store.calls == []


class TestPushSection:

    def test_first_section_clears_stale_entries(self, full_config, store, execution):
        store.entries.update({"activityId": "stale", "tenantId": "stale", "other": "x"})
        projection = LoggingProjection(full_config, store=store)

        projection.push_section(ExecutionSnapshot(activity_id="task1"))

        assert store.entries == {"activityId": "task1", "other": "x"}

    def test_later_sections_do_not_clear(self, full_config, store, execution):
        projection = LoggingProjection(full_config, store=store)
        projection.push_section(execution)
        store.calls.clear()

        projection.push_section(execution.child(activity_id="task2"))

        assert store.writes() == [("put", "activityId", "task2")]

    def test_all_roles_are_published(self, full_config, store, execution):
        projection = LoggingProjection(
            full_config, store=store, application_resolver=lambda: "invoice-app"
        )
        assert projection.push_section(execution) is True
        assert store.entries == {
            "activityId": "task1",
            "processDefinitionId": "invoice:1:abc",
            "processInstanceId": "pi-1",
            "tenantId": "tenant-a",
            "applicationName": "invoice-app",
            "businessKey": "order-42",
        }

    def test_application_name_skipped_without_application(
        self, full_config, store, execution
    ):
        projection = LoggingProjection(
            full_config, store=store, application_resolver=lambda: None
        )
        projection.push_section(execution)
        assert "applicationName" not in store.entries
        assert projection.get_latest_property_value("applicationName") is None

    def test_application_name_from_ambient_scope(self, full_config, store, execution):
        projection = LoggingProjection(full_config, store=store)
        with application_scope("billing"):
            projection.push_section(execution)
        assert store.entries["applicationName"] == "billing"

    def test_resolver_not_called_when_role_disabled(self, activity_only_config, store):
        resolver = MagicMock(return_value="app")
        projection = LoggingProjection(
            activity_only_config, store=store, application_resolver=resolver
        )
        projection.push_section(activity("task1"))
        resolver.assert_not_called()

    def test_business_key_disabled_by_default(self, store, execution):
        projection = LoggingProjection(LoggingContextConfig(), store=store)
        projection.push_section(execution)
        assert "businessKey" not in store.entries
        assert projection.name_for(ContextRole.BUSINESS_KEY) is None

    def test_explicit_null_removes_key(self, full_config, store, execution):
        projection = LoggingProjection(full_config, store=store)
        projection.push_section(execution)
        assert projection.push_section(execution.child(tenant_id=None)) is True

        assert "tenantId" not in store.entries
        assert projection.get_latest_property_value("tenantId") is None

        projection.pop_section()
        assert store.entries["tenantId"] == "tenant-a"


class TestPopSection:

    def test_restores_innermost_open_values(self, full_config, store, execution):
        projection = LoggingProjection(full_config, store=store)
        projection.push_section(execution)
        projection.push_section(execution.child(activity_id="sub", process_instance_id="pi-2"))
        projection.push_section(
            execution.child(activity_id="subtask", process_instance_id="pi-2")
        )

        projection.pop_section()
        assert store.entries["activityId"] == "sub"
        assert store.entries["processInstanceId"] == "pi-2"

        projection.pop_section()
        assert store.entries["activityId"] == "task1"
        assert store.entries["processInstanceId"] == "pi-1"

        projection.pop_section()
        assert store.entries == {}

    def test_extra_pop_is_noop(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)
        projection.pop_section()
        assert store.calls == []


class TestSection:

    def test_context_manager_pops_on_exit(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)
        with projection.section(activity("task1")) as changed:
            assert changed is True
            assert store.entries == {"activityId": "task1"}
        assert store.entries == {}
        assert projection.section_count == 0

    def test_context_manager_pops_on_error(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)
        projection.push_section(activity("outer"))

        with pytest.raises(RuntimeError):
            with projection.section(activity("inner")):
                raise RuntimeError("boom")

        assert store.entries == {"activityId": "outer"}

    def test_unchanged_section_does_not_pop_outer(self, activity_only_config, store):
        projection = LoggingProjection(activity_only_config, store=store)
        projection.push_section(activity("outer"))
        with projection.section(activity("outer")) as changed:
            assert changed is False
        assert store.entries == {"activityId": "outer"}
        assert projection.section_count == 1


class TestSyncAndClear:

    def test_clear_external_context(self, full_config, store):
        store.entries.update({"activityId": "a", "tenantId": "t", "foreign": "f"})
        projection = LoggingProjection(full_config, store=store)
        projection.clear_external_context()
        assert store.entries == {"foreign": "f"}

    def test_sync_all_rewrites_current_values(self, full_config, store, execution):
        projection = LoggingProjection(full_config, store=store, application_resolver=lambda: None)
        projection.push_section(execution)

        # altered out of band
        store.entries["activityId"] = "foreign"
        store.entries["applicationName"] = "foreign"

        projection.sync_all()
        assert store.entries["activityId"] == "task1"
        assert "applicationName" not in store.entries

    def test_sync_all_without_values_is_noop(self, full_config, store):
        projection = LoggingProjection(full_config, store=store)
        projection.sync_all()
        assert store.calls == []


class TestFetchCurrentContext:

    def test_preserves_store_without_rewriting(self, full_config, store):
        store.entries.update({"activityId": "callerTask", "tenantId": "t1"})
        projection = LoggingProjection(full_config, store=store)

        assert projection.fetch_current_context() is True
        assert store.writes() == []
        assert projection.get_latest_property_value("activityId") == "callerTask"
        assert projection.get_latest_property_value("tenantId") == "t1"

    def test_nested_invocation_restores_caller_state(self, full_config, store, execution):
        store.entries.update({"activityId": "callerTask", "tenantId": "t1"})
        projection = LoggingProjection(full_config, store=store)
        projection.fetch_current_context()

        projection.push_section(execution.child(business_key=None))
        assert store.entries["activityId"] == "task1"
        assert store.entries["tenantId"] == "tenant-a"

        projection.pop_section()
        assert store.entries == {"activityId": "callerTask", "tenantId": "t1"}

    def test_empty_store_opens_no_section(self, full_config, store):
        projection = LoggingProjection(full_config, store=store)
        assert projection.fetch_current_context() is False
        assert projection.section_count == 0


class TestDefaultStoreAndLogging:

    def test_uses_default_mdc(self, activity_only_config):
        projection = LoggingProjection(activity_only_config)
        with projection.section(activity("task1")):
            assert MDC.get("activityId") == "task1"
        assert MDC.get("activityId") is None

    def test_debug_records_for_section_changes(self, activity_only_config, store):
        mock_logger = MagicMock()
        projection = LoggingProjection(
            activity_only_config,
            store=store,
            logger=OTelLogger(mock_logger, source="LoggingProjection"),
        )
        projection.push_section(activity("task1"))
        projection.pop_section()

        bodies = [call[0][0].body for call in mock_logger.emit.call_args_list]
        assert bodies == [
            "Logging context cleared from MDC",
            "Logging context section pushed",
            "Logging context section popped",
        ]
