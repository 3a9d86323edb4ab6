"""Tests for Render PostgreSQL and Key Value tools."""

import pytest
from pydantic import ValidationError

from render_tools.client import InvalidIdentifierError


class TestPostgresTools:

    @pytest.mark.asyncio
    async def test_list_filters(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "postgres": {"id": "dpg-1"}}]

        result = await run_tool(
            "render_postgres_list", limit=20, filters={"region": "ohio", "status": "available"}
        )

        assert result == [{"id": "dpg-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/postgres", query={"region": "ohio", "status": "available", "limit": 20}
        )

    @pytest.mark.asyncio
    async def test_create(self, run_tool, mock_client):
        await run_tool(
            "render_postgres_create",
            name="orders",
            owner_id="tea-1",
            additional_options={
                "database_name": "orders",
                "plan": "basic_256mb",
                "version": "16",
                "high_availability_enabled": False,
            },
        )

        mock_client.request.assert_awaited_once_with(
            "POST",
            "/postgres",
            {
                "name": "orders",
                "ownerId": "tea-1",
                "databaseName": "orders",
                "plan": "basic_256mb",
                "version": "16",
                "highAvailabilityEnabled": False,
            },
        )

    @pytest.mark.asyncio
    async def test_create_omits_unset_high_availability(self, run_tool, mock_client):
        await run_tool("render_postgres_create", name="orders", owner_id="tea-1")

        assert mock_client.request.await_args.args[2] == {"name": "orders", "ownerId": "tea-1"}

    @pytest.mark.asyncio
    async def test_update(self, run_tool, mock_client):
        await run_tool(
            "render_postgres_update", postgres_id="dpg-1", plan="pro_4gb", high_availability_enabled=True
        )

        mock_client.request.assert_awaited_once_with(
            "PATCH", "/postgres/dpg-1", {"plan": "pro_4gb", "highAvailabilityEnabled": True}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,method,suffix", [
        ("render_postgres_get", "GET", ""),
        ("render_postgres_get_connection_info", "GET", "/connection-info"),
        ("render_postgres_suspend", "POST", "/suspend"),
        ("render_postgres_resume", "POST", "/resume"),
        ("render_postgres_failover", "POST", "/failover"),
        ("render_postgres_get_recovery_status", "GET", "/recovery"),
        ("render_postgres_create_export", "POST", "/exports"),
    ])
    async def test_single_request_operations(self, run_tool, mock_client, tool_name, method, suffix):
        mock_client.request.return_value = {"id": "dpg-1"}

        result = await run_tool(tool_name, postgres_id="dpg-1")

        assert result == {"id": "dpg-1"}
        mock_client.request.assert_awaited_once_with(method, f"/postgres/dpg-1{suffix}")

    @pytest.mark.asyncio
    async def test_restart_and_delete_report_success(self, run_tool, mock_client):
        assert await run_tool("render_postgres_restart", postgres_id="dpg-1") == {
            "success": True, "postgresId": "dpg-1"
        }
        assert await run_tool("render_postgres_delete", postgres_id="dpg-1") == {
            "success": True, "postgresId": "dpg-1"
        }

    @pytest.mark.asyncio
    async def test_trigger_recovery(self, run_tool, mock_client):
        await run_tool(
            "render_postgres_trigger_recovery",
            postgres_id="dpg-1",
            recovery_target_time="2026-03-01T12:00:00Z",
        )

        mock_client.request.assert_awaited_once_with(
            "POST", "/postgres/dpg-1/recovery", {"recoveryTargetTime": "2026-03-01T12:00:00Z"}
        )

    @pytest.mark.asyncio
    async def test_trigger_recovery_requires_time(self, run_tool):
        with pytest.raises(ValidationError):
            await run_tool("render_postgres_trigger_recovery", postgres_id="dpg-1")

    @pytest.mark.asyncio
    async def test_list_exports_all(self, run_tool, mock_client):
        mock_client.paginate.return_value = [{"id": "exp-1"}]

        result = await run_tool("render_postgres_list_exports", postgres_id="dpg-1", return_all=True)

        assert result == [{"id": "exp-1"}]
        mock_client.paginate.assert_awaited_once_with("GET", "/postgres/dpg-1/exports", query={})

    @pytest.mark.asyncio
    async def test_users(self, run_tool, mock_client):
        await run_tool("render_postgres_create_user", postgres_id="dpg-1", username="reporting")
        mock_client.request.assert_awaited_once_with(
            "POST", "/postgres/dpg-1/users", {"username": "reporting"}
        )

        mock_client.request.reset_mock()
        result = await run_tool("render_postgres_delete_user", postgres_id="dpg-1", user_id="usr-9")
        assert result == {"success": True, "userId": "usr-9"}
        mock_client.request.assert_awaited_once_with("DELETE", "/postgres/dpg-1/users/usr-9")

    @pytest.mark.asyncio
    async def test_list_users(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "user": {"name": "app"}}]

        assert await run_tool("render_postgres_list_users", postgres_id="dpg-1") == [{"name": "app"}]

    @pytest.mark.asyncio
    async def test_invalid_postgres_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Expected format: dpg-xxxxx"):
            await run_tool("render_postgres_get", postgres_id="red-1")

        mock_client.request.assert_not_awaited()


class TestKeyValueTools:

    @pytest.mark.asyncio
    async def test_list(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "keyValue": {"id": "red-1"}}]

        result = await run_tool("render_key_value_list", filters={"name": "cache"})

        assert result == [{"id": "red-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/key-value", query={"name": "cache", "limit": 50}
        )

    @pytest.mark.asyncio
    async def test_create(self, run_tool, mock_client):
        await run_tool(
            "render_key_value_create",
            name="cache",
            owner_id="tea-1",
            additional_options={"maxmemory_policy": "allkeys_lru", "region": "frankfurt"},
        )

        mock_client.request.assert_awaited_once_with(
            "POST",
            "/key-value",
            {"name": "cache", "ownerId": "tea-1", "maxmemoryPolicy": "allkeys_lru", "region": "frankfurt"},
        )

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_policy(self, run_tool):
        with pytest.raises(ValidationError):
            await run_tool(
                "render_key_value_create",
                name="cache",
                owner_id="tea-1",
                additional_options={"maxmemory_policy": "evict_everything"},
            )

    @pytest.mark.asyncio
    async def test_update(self, run_tool, mock_client):
        await run_tool("render_key_value_update", key_value_id="red-1", name="cache-2", plan="pro")

        mock_client.request.assert_awaited_once_with(
            "PATCH", "/key-value/red-1", {"name": "cache-2", "plan": "pro"}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,method,suffix", [
        ("render_key_value_get", "GET", ""),
        ("render_key_value_get_connection_info", "GET", "/connection-info"),
        ("render_key_value_suspend", "POST", "/suspend"),
        ("render_key_value_resume", "POST", "/resume"),
    ])
    async def test_single_request_operations(self, run_tool, mock_client, tool_name, method, suffix):
        await run_tool(tool_name, key_value_id="red-1")

        mock_client.request.assert_awaited_once_with(method, f"/key-value/red-1{suffix}")

    @pytest.mark.asyncio
    async def test_delete(self, run_tool, mock_client):
        result = await run_tool("render_key_value_delete", key_value_id="red-1")

        assert result == {"success": True, "keyValueId": "red-1"}

    @pytest.mark.asyncio
    async def test_invalid_key_value_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Invalid Key Value ID format"):
            await run_tool("render_key_value_get", key_value_id="kv-1")
