"""Tests for Render project and environment tools."""

import pytest

from render_tools.client import InvalidIdentifierError


class TestProjectTools:

    @pytest.mark.asyncio
    async def test_list_filters(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "project": {"id": "prj-1"}}]

        result = await run_tool("render_project_list", filters={"owner_id": "tea-1"})

        assert result == [{"id": "prj-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/projects", query={"ownerId": "tea-1", "limit": 50}
        )

    @pytest.mark.asyncio
    async def test_create(self, run_tool, mock_client):
        await run_tool(
            "render_project_create", name="shop", owner_id="tea-1", description="Storefront"
        )

        mock_client.request.assert_awaited_once_with(
            "POST", "/projects", {"name": "shop", "ownerId": "tea-1", "description": "Storefront"}
        )

    @pytest.mark.asyncio
    async def test_update_can_clear_description(self, run_tool, mock_client):
        await run_tool("render_project_update", project_id="prj-1", description="")

        mock_client.request.assert_awaited_once_with(
            "PATCH", "/projects/prj-1", {"description": ""}
        )

    @pytest.mark.asyncio
    async def test_update_name_only(self, run_tool, mock_client):
        await run_tool("render_project_update", project_id="prj-1", name="shop-v2")

        mock_client.request.assert_awaited_once_with("PATCH", "/projects/prj-1", {"name": "shop-v2"})

    @pytest.mark.asyncio
    async def test_delete(self, run_tool, mock_client):
        result = await run_tool("render_project_delete", project_id="prj-1")

        assert result == {"success": True, "projectId": "prj-1"}
        mock_client.request.assert_awaited_once_with("DELETE", "/projects/prj-1")

    @pytest.mark.asyncio
    async def test_invalid_project_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Invalid project ID format"):
            await run_tool("render_project_get", project_id="proj-1")

        mock_client.request.assert_not_awaited()


class TestEnvironmentTools:

    @pytest.mark.asyncio
    async def test_list(self, run_tool, mock_client):
        mock_client.request.return_value = [{"cursor": "c", "environment": {"id": "env-1"}}]

        result = await run_tool("render_environment_list", project_id="prj-1")

        assert result == [{"id": "env-1"}]
        mock_client.request.assert_awaited_once_with(
            "GET", "/projects/prj-1/environments", query={"limit": 50}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("protected,expected", [
        (True, "protected"),
        (False, "unprotected"),
    ])
    async def test_create_protection(self, run_tool, mock_client, protected, expected):
        await run_tool(
            "render_environment_create", project_id="prj-1", name="staging", protected_status=protected
        )

        mock_client.request.assert_awaited_once_with(
            "POST",
            "/projects/prj-1/environments",
            {"name": "staging", "protectedStatus": expected},
        )

    @pytest.mark.asyncio
    async def test_create_without_protection(self, run_tool, mock_client):
        await run_tool("render_environment_create", project_id="prj-1", name="staging")

        assert mock_client.request.await_args.args[2] == {"name": "staging"}

    @pytest.mark.asyncio
    async def test_update(self, run_tool, mock_client):
        await run_tool(
            "render_environment_update",
            project_id="prj-1",
            environment_id="env-1",
            protected_status=False,
        )

        mock_client.request.assert_awaited_once_with(
            "PATCH",
            "/projects/prj-1/environments/env-1",
            {"protectedStatus": "unprotected"},
        )

    @pytest.mark.asyncio
    async def test_add_resources_splits_ids(self, run_tool, mock_client):
        await run_tool(
            "render_environment_add_resources",
            project_id="prj-1",
            environment_id="env-1",
            resource_ids="srv-1, dpg-2,,red-3 ",
        )

        mock_client.request.assert_awaited_once_with(
            "POST",
            "/projects/prj-1/environments/env-1/resources",
            {"resourceIds": ["srv-1", "dpg-2", "red-3"]},
        )

    @pytest.mark.asyncio
    async def test_remove_resources(self, run_tool, mock_client):
        await run_tool(
            "render_environment_remove_resources",
            project_id="prj-1",
            environment_id="env-1",
            resource_ids="srv-1",
        )

        mock_client.request.assert_awaited_once_with(
            "DELETE",
            "/projects/prj-1/environments/env-1/resources",
            {"resourceIds": ["srv-1"]},
        )

    @pytest.mark.asyncio
    async def test_project_validated_before_environment(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            await run_tool("render_environment_get", project_id="bad", environment_id="also-bad")

        assert exc_info.value.prefix == "prj-"

    @pytest.mark.asyncio
    async def test_invalid_environment_id(self, run_tool, mock_client):
        with pytest.raises(InvalidIdentifierError, match="Invalid environment ID format"):
            await run_tool("render_environment_delete", project_id="prj-1", environment_id="e-1")
