"""Tests for Render service tools."""

import pytest
from pydantic import ValidationError

from render_tools.client import InvalidIdentifierError
from tests.fixtures.render_responses import SERVICE


class TestServiceList:

    @pytest.mark.asyncio
    async def test_list_with_limit_unwraps_page(self, run_tool, mock_client):
        mock_client.request.return_value = [
            {"cursor": "c1", "service": {"id": "srv-1"}},
            {"cursor": "c2", "service": {"id": "srv-2"}},
            {"cursor": "c3", "service": {"id": "srv-3"}},
        ]

        result = await run_tool("render_service_list", limit=2)

        assert result == [{"id": "srv-1"}, {"id": "srv-2"}]
        mock_client.request.assert_awaited_once_with("GET", "/services", query={"limit": 2})
        mock_client.paginate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_filters(self, run_tool, mock_client):
        mock_client.request.return_value = []

        await run_tool(
            "render_service_list",
            filters={
                "name": "api",
                "owner_id": "tea-1",
                "type": "web_service",
                "region": "frankfurt",
                "suspended": "not_suspended",
                "created_after": "2026-01-01T00:00:00Z",
            },
        )

        mock_client.request.assert_awaited_once_with(
            "GET",
            "/services",
            query={
                "name": "api",
                "ownerId": "tea-1",
                "type": "web_service",
                "region": "frankfurt",
                "suspended": "not_suspended",
                "createdAfter": "2026-01-01T00:00:00Z",
                "limit": 50,
            },
        )

    @pytest.mark.asyncio
    async def test_list_return_all_paginates(self, run_tool, mock_client):
        mock_client.paginate.return_value = [{"id": "srv-1"}]

        result = await run_tool("render_service_list", return_all=True, filters={"env": "docker"})

        assert result == [{"id": "srv-1"}]
        mock_client.paginate.assert_awaited_once_with("GET", "/services", query={"env": "docker"})

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_region(self, run_tool):
        with pytest.raises(ValidationError):
            await run_tool("render_service_list", filters={"region": "mars"})

    @pytest.mark.asyncio
    async def test_limit_bounds(self, run_tool):
        with pytest.raises(ValidationError):
            await run_tool("render_service_list", limit=101)


class TestServiceCrud:

    @pytest.mark.asyncio
    async def test_get(self, run_tool, mock_client):
        mock_client.request.return_value = SERVICE

        result = await run_tool("render_service_get", service_id="srv-abc123")

        assert result == SERVICE
        mock_client.request.assert_awaited_once_with("GET", "/services/srv-abc123")

    @pytest.mark.asyncio
    async def test_invalid_id_never_reaches_api(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Expected format: srv-xxxxx, got: abc"):
            await run_tool("render_service_get", service_id="abc")

        mock_client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_from_git(self, run_tool, mock_client):
        await run_tool(
            "render_service_create",
            type="web_service",
            name="api",
            owner_id="tea-1",
            repo="https://github.com/example/api",
            branch="develop",
            additional_options={"plan": "starter", "num_instances": 2, "auto_deploy": "yes"},
        )

        mock_client.request.assert_awaited_once_with(
            "POST",
            "/services",
            {
                "type": "web_service",
                "name": "api",
                "ownerId": "tea-1",
                "repo": "https://github.com/example/api",
                "branch": "develop",
                "plan": "starter",
                "numInstances": 2,
                "autoDeploy": "yes",
            },
        )

    @pytest.mark.asyncio
    async def test_create_from_image(self, run_tool, mock_client):
        await run_tool(
            "render_service_create",
            type="background_worker",
            name="worker",
            owner_id="tea-1",
            deployment_source="image",
            image="docker.io/example/worker:1.0",
        )

        body = mock_client.request.await_args.args[2]
        assert body["image"] == {"ownerId": "tea-1", "imagePath": "docker.io/example/worker:1.0"}
        assert "repo" not in body
        assert "branch" not in body

    @pytest.mark.asyncio
    async def test_update(self, run_tool, mock_client):
        await run_tool(
            "render_service_update",
            service_id="srv-abc123",
            update_fields={"name": "api-v2", "start_command": "gunicorn app", "image": "ex/api:2"},
        )

        mock_client.request.assert_awaited_once_with(
            "PATCH",
            "/services/srv-abc123",
            {"name": "api-v2", "startCommand": "gunicorn app", "image": {"imagePath": "ex/api:2"}},
        )

    @pytest.mark.asyncio
    async def test_delete_returns_success(self, run_tool, mock_client):
        result = await run_tool("render_service_delete", service_id="srv-abc123")

        assert result == {"success": True, "serviceId": "srv-abc123"}
        mock_client.request.assert_awaited_once_with("DELETE", "/services/srv-abc123")


class TestServiceLifecycle:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,suffix", [
        ("render_service_suspend", "/suspend"),
        ("render_service_resume", "/resume"),
    ])
    async def test_suspend_resume_return_response(self, run_tool, mock_client, tool_name, suffix):
        mock_client.request.return_value = {"id": "srv-abc123"}

        result = await run_tool(tool_name, service_id="srv-abc123")

        assert result == {"id": "srv-abc123"}
        mock_client.request.assert_awaited_once_with("POST", f"/services/srv-abc123{suffix}")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool_name,method,suffix", [
        ("render_service_restart", "POST", "/restart"),
        ("render_service_purge_cache", "POST", "/cache/purge"),
        ("render_service_delete_autoscaling", "DELETE", "/autoscaling"),
    ])
    async def test_bodyless_operations(self, run_tool, mock_client, tool_name, method, suffix):
        result = await run_tool(tool_name, service_id="srv-abc123")

        assert result == {"success": True, "serviceId": "srv-abc123"}
        mock_client.request.assert_awaited_once_with(method, f"/services/srv-abc123{suffix}")

    @pytest.mark.asyncio
    async def test_scale(self, run_tool, mock_client):
        await run_tool("render_service_scale", service_id="srv-abc123", num_instances=3)

        mock_client.request.assert_awaited_once_with(
            "POST", "/services/srv-abc123/scale", {"numInstances": 3}
        )

    @pytest.mark.asyncio
    async def test_update_autoscaling(self, run_tool, mock_client):
        await run_tool(
            "render_service_update_autoscaling",
            service_id="srv-abc123",
            min_instances=2,
            max_instances=5,
            autoscaling_criteria={"cpu": 70},
        )

        mock_client.request.assert_awaited_once_with(
            "PUT",
            "/services/srv-abc123/autoscaling",
            {
                "enabled": True,
                "min": 2,
                "max": 5,
                "criteria": {"cpu": {"enabled": True, "percentage": 70}},
            },
        )
