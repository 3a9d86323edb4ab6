"""Tests for Render environment group and webhook tools."""

import pytest
from pydantic import ValidationError

from render_tools.client import InvalidIdentifierError
from tests.fixtures.render_responses import WEBHOOK


class TestEnvironmentGroupTools:

    @pytest.mark.asyncio
    async def test_list(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "envGroup": {"id": "evg-1"}}]

        result = await run_tool("render_environment_group_list", filters={"owner_id": "tea-1"})

        assert result == [{"id": "evg-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/env-groups", query={"ownerId": "tea-1", "limit": 50}
        )

    @pytest.mark.asyncio
    async def test_create_and_update(self, run_tool, mock_client):
        await run_tool("render_environment_group_create", name="shared", owner_id="tea-1")
        mock_client.request.assert_awaited_once_with(
            "POST", "/env-groups", {"name": "shared", "ownerId": "tea-1"}
        )

        mock_client.request.reset_mock()
        await run_tool("render_environment_group_update", env_group_id="evg-1", name="shared-2")
        mock_client.request.assert_awaited_once_with("PATCH", "/env-groups/evg-1", {"name": "shared-2"})

    @pytest.mark.asyncio
    async def test_delete(self, run_tool, mock_client):
        result = await run_tool("render_environment_group_delete", env_group_id="evg-1")

        assert result == {"success": True, "envGroupId": "evg-1"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,suffix", [
        ("render_environment_group_link_service", "/link-service"),
        ("render_environment_group_unlink_service", "/unlink-service"),
    ])
    async def test_link_and_unlink_service(self, run_tool, mock_client, tool_name, suffix):
        await run_tool(tool_name, env_group_id="evg-1", service_id="srv-abc123")

        mock_client.request.assert_awaited_once_with(
            "POST", f"/env-groups/evg-1{suffix}", {"serviceId": "srv-abc123"}
        )

    @pytest.mark.asyncio
    async def test_link_validates_service_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Invalid service ID format"):
            await run_tool("render_environment_group_link_service", env_group_id="evg-1", service_id="x")

        mock_client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_env_vars(self, run_tool, mock_client):
        await run_tool("render_environment_group_update_env_var", env_group_id="evg-1", key="TOKEN", generate_value=True)
        mock_client.request.assert_awaited_once_with(
            "PUT", "/env-groups/evg-1/env-vars/TOKEN", {"key": "TOKEN", "generateValue": "yes"}
        )

        mock_client.request.reset_mock()
        await run_tool("render_environment_group_get_env_var", env_group_id="evg-1", env_var_key="TOKEN")
        mock_client.request.assert_awaited_once_with("GET", "/env-groups/evg-1/env-vars/TOKEN")

        result = await run_tool(
            "render_environment_group_delete_env_var", env_group_id="evg-1", env_var_key="TOKEN"
        )
        assert result == {"success": True, "envVarKey": "TOKEN"}

    @pytest.mark.asyncio
    async def test_secret_files(self, run_tool, mock_client):
        await run_tool(
            "render_environment_group_update_secret_file",
            env_group_id="evg-1",
            name="keys/id_rsa",
            contents="hello",
        )
        mock_client.request.assert_awaited_once_with(
            "PUT",
            "/env-groups/evg-1/secret-files/keys%2Fid_rsa",
            {"name": "keys/id_rsa", "contents": "aGVsbG8="},
        )

        mock_client.request.reset_mock()
        result = await run_tool(
            "render_environment_group_delete_secret_file",
            env_group_id="evg-1",
            secret_file_name="keys/id_rsa",
        )
        assert result == {"success": True, "secretFileName": "keys/id_rsa"}
        mock_client.request.assert_awaited_once_with(
            "DELETE", "/env-groups/evg-1/secret-files/keys%2Fid_rsa"
        )

    @pytest.mark.asyncio
    async def test_secret_file_name_keeps_unreserved_marks(self, run_tool, mock_client):
        await run_tool(
            "render_environment_group_get_secret_file",
            env_group_id="evg-1",
            secret_file_name="key (old)!.pem",
        )

        mock_client.request.assert_awaited_once_with(
            "GET", "/env-groups/evg-1/secret-files/key%20(old)!.pem"
        )

    @pytest.mark.asyncio
    async def test_invalid_env_group_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Expected format: evg-xxxxx"):
            await run_tool("render_environment_group_get", env_group_id="grp-1")


class TestWebhookTools:

    @pytest.mark.asyncio
    async def test_list_returns_whole_page(self, run_tool, mock_client):
        mock_client.request.return_value = [
            {"cursor": "c1", "webhook": {"id": "whk-1"}},
            {"cursor": "c2", "webhook": {"id": "whk-2"}},
        ]

        result = await run_tool("render_webhook_list", owner_id="tea-1", limit=1)

        assert result == [{"id": "whk-1"}, {"id": "whk-2"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/webhooks", query={"ownerId": "tea-1", "limit": 1}
        )

    @pytest.mark.asyncio
    async def test_list_passes_through_non_list(self, run_tool, mock_client):
        mock_client.request.return_value = {"message": "unexpected"}

        result = await run_tool("render_webhook_list", owner_id="tea-1")

        assert result == {"message": "unexpected"}

    @pytest.mark.asyncio
    async def test_list_return_all(self, run_tool, mock_client):
        await run_tool("render_webhook_list", owner_id="tea-1", return_all=True)

        mock_client.paginate.assert_awaited_once_with("GET", "/webhooks", query={"ownerId": "tea-1"})

    @pytest.mark.asyncio
    async def test_create(self, run_tool, mock_client):
        mock_client.request.return_value = WEBHOOK

        result = await run_tool(
            "render_webhook_create",
            owner_id="tea-1",
            url="https://hooks.example.com/x",
            events=["deploy_succeeded", "server_failed"],
            service_ids="srv-1, srv-2",
        )

        assert result == WEBHOOK
        mock_client.request.assert_awaited_once_with(
            "POST",
            "/webhooks",
            {
                "ownerId": "tea-1",
                "url": "https://hooks.example.com/x",
                "events": ["deploy_succeeded", "server_failed"],
                "serviceIds": ["srv-1", "srv-2"],
            },
        )

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_event(self, run_tool):
        with pytest.raises(ValidationError):
            await run_tool(
                "render_webhook_create", owner_id="tea-1", url="https://x", events=["coffee_ready"]
            )

    @pytest.mark.asyncio
    async def test_update_skips_empty_events(self, run_tool, mock_client):
        await run_tool("render_webhook_update", webhook_id="whk-1", url="https://new")

        mock_client.request.assert_awaited_once_with("PATCH", "/webhooks/whk-1", {"url": "https://new"})

    @pytest.mark.asyncio
    async def test_update_events(self, run_tool, mock_client):
        await run_tool("render_webhook_update", webhook_id="whk-1", events=["deploy_failed"])

        mock_client.request.assert_awaited_once_with(
            "PATCH", "/webhooks/whk-1", {"events": ["deploy_failed"]}
        )

    @pytest.mark.asyncio
    async def test_delete(self, run_tool, mock_client):
        result = await run_tool("render_webhook_delete", webhook_id="whk-1")

        assert result == {"success": True, "webhookId": "whk-1"}
        mock_client.request.assert_awaited_once_with("DELETE", "/webhooks/whk-1")

    @pytest.mark.asyncio
    async def test_list_events_with_status(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "event": {"id": "evt-1"}}]

        result = await run_tool("render_webhook_list_events", webhook_id="whk-1", status="failed")

        assert result == [{"id": "evt-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/webhooks/whk-1/events", query={"status": "failed", "limit": 50}
        )
