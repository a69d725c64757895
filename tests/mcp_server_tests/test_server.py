"""Tests for the MCP server module."""

import os
import sys
import json
import shutil
import pytest
from unittest.mock import patch

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)


# Bundled example profiles
EXAMPLE_PROFILES = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../profiles'))

EXPECTED_TOOLS = {
    'list_profiles',
    'reload_profiles',
    'get_income_summary',
    'get_month_calendar',
    'get_goal_plan',
    'set_job_override',
    'clear_job_override',
    'add_goal_money',
    'remove_goal_money',
}


@pytest.fixture
def profiles_env(tmp_path):
    """Point the server at a temporary copy of the example profile."""
    shutil.copytree(os.path.join(EXAMPLE_PROFILES, 'example'), str(tmp_path / 'example'))
    mcp_server.tools = None
    with patch.dict(os.environ, {'CASH_JAR_PROFILES_DIR': str(tmp_path)}):
        yield str(tmp_path)
    mcp_server.tools = None


def payload(result):
    assert isinstance(result, list)
    assert len(result) == 1
    assert isinstance(result[0], TextContent)
    return json.loads(result[0].text)


class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        assert mcp_server.server.name == "cash-jar-planner"

    def test_profile_param_schema(self):
        assert mcp_server.PROFILE_PARAM['type'] == 'string'
        assert 'description' in mcp_server.PROFILE_PARAM


class TestGetTools:
    """Tests for get_tools function."""

    def test_get_tools_initializes_on_first_call(self, profiles_env):
        tools = mcp_server.get_tools()
        # Check by class name since we're using dynamic imports
        assert tools.__class__.__name__ == 'MultiProfileTools'
        assert tools.root == profiles_env

    def test_get_tools_returns_cached_instance(self, profiles_env):
        assert mcp_server.get_tools() is mcp_server.get_tools()

    def test_get_tools_uses_env_default_profile(self, profiles_env):
        with patch.dict(os.environ, {'CASH_JAR_PROFILE': 'example'}):
            tools = mcp_server.get_tools()
        assert tools.default_profile == 'example'


class TestListTools:
    """Tests for list_tools function."""

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        tools = await mcp_server.list_tools()
        assert all(isinstance(t, Tool) for t in tools)
        assert {t.name for t in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        tools = await mcp_server.list_tools()
        for tool in tools:
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_override_requires_job_and_date(self):
        tools = await mcp_server.list_tools()
        override = next(t for t in tools if t.name == 'set_job_override')
        assert override.inputSchema['required'] == ['job_id', 'pay_date']


class TestCallTool:
    """Tests for call_tool function."""

    @pytest.mark.asyncio
    async def test_call_list_profiles(self, profiles_env):
        data = payload(await mcp_server.call_tool('list_profiles', {}))
        assert data['available_profiles'] == ['example']

    @pytest.mark.asyncio
    async def test_call_get_income_summary(self, profiles_env):
        data = payload(await mcp_server.call_tool('get_income_summary', {'use_net': True}))
        assert data['basis'] == 'net'
        assert data['profile'] == 'example'

    @pytest.mark.asyncio
    async def test_call_get_month_calendar(self, profiles_env):
        data = payload(await mcp_server.call_tool('get_month_calendar',
                                                  {'month': '2025-01', 'week_start': 'monday'}))
        assert data['weeks'][0]['end'] == '2025-01-05'

    @pytest.mark.asyncio
    async def test_call_get_goal_plan(self, profiles_env):
        data = payload(await mcp_server.call_tool('get_goal_plan', {'goal_id': 'goal-laptop', 'max_payments': 2}))
        assert len(data['goals'][0]['upcoming_payments']) == 2

    @pytest.mark.asyncio
    async def test_call_override_round_trip(self, profiles_env):
        data = payload(await mcp_server.call_tool('set_job_override',
                                                  {'job_id': 'job-cafe', 'pay_date': '2025-01-31', 'amount': 700}))
        assert data['gross'] == 700.0
        data = payload(await mcp_server.call_tool('clear_job_override',
                                                  {'job_id': 'job-cafe', 'pay_date': '2025-01-31'}))
        assert data['status'] == 'cleared'

    @pytest.mark.asyncio
    async def test_call_goal_money(self, profiles_env):
        data = payload(await mcp_server.call_tool('add_goal_money', {'goal_id': 'goal-trip', 'amount': 100}))
        assert data['goal']['current_saved'] == 250.0
        data = payload(await mcp_server.call_tool('remove_goal_money', {'goal_id': 'goal-trip', 'amount': 25}))
        assert data['goal']['current_saved'] == 225.0

    @pytest.mark.asyncio
    async def test_call_reload_profiles(self, profiles_env):
        data = payload(await mcp_server.call_tool('reload_profiles', {}))
        assert data['status'] == 'success'

    @pytest.mark.asyncio
    async def test_unknown_tool(self, profiles_env):
        data = payload(await mcp_server.call_tool('get_tax_details', {}))
        assert data == {'error': 'Unknown tool: get_tax_details'}

    @pytest.mark.asyncio
    async def test_errors_are_returned_as_json(self, profiles_env):
        data = payload(await mcp_server.call_tool('add_goal_money', {'goal_id': 'goal-trip', 'amount': -5}))
        assert data == {'error': 'Amount must be greater than 0'}

    @pytest.mark.asyncio
    async def test_missing_argument_is_error(self, profiles_env):
        data = payload(await mcp_server.call_tool('set_job_override', {'job_id': 'job-cafe'}))
        assert 'error' in data

    @pytest.mark.asyncio
    async def test_unknown_profile_is_error(self, profiles_env):
        data = payload(await mcp_server.call_tool('get_goal_plan', {'profile': 'nobody'}))
        assert 'not found' in data['error']
