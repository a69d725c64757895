#!/usr/bin/env python3
"""MCP Server for Cash Jar Planner.

This server exposes income projections, the income calendar and savings
goal plans as MCP tools, allowing AI assistants to answer questions about
a user's money and record overrides and goal payments.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProfileTools


# Create the MCP server
server = Server("cash-jar-planner")

# Global tools instance (initialized on first call)
tools: MultiProfileTools | None = None


def get_tools() -> MultiProfileTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default profile can be set via CASH_JAR_PROFILE env var
        default_profile = os.environ.get('CASH_JAR_PROFILE')
        tools = MultiProfileTools(default_profile=default_profile)
    return tools


# Common profile parameter schema
PROFILE_PARAM = {
    "type": "string",
    "description": "The profile name (folder in the profiles directory). If not specified, uses the default profile. Use list_profiles to see available profiles."
}

USE_NET_PARAM = {
    "type": "boolean",
    "description": "Report net amounts (after flat tax) instead of gross. Defaults to false."
}

DATE_PARAM = {
    "type": "string",
    "description": "Calendar day as YYYY-MM-DD"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available planner tools."""
    return [
        Tool(
            name="list_profiles",
            description="List all available profiles with counts of their income sources and savings goals.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_profiles",
            description="Reload all profiles from disk. Use this after profile files were changed outside the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_income_summary",
            description="Get projected monthly income from jobs and passive income, plus every income source with its per-period and per-month amounts.",
            inputSchema={
                "type": "object",
                "properties": {
                    "use_net": USE_NET_PARAM,
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_month_calendar",
            description="Get every income event of one month grouped into weeks, with week and month totals. Pay-period overrides are applied.",
            inputSchema={
                "type": "object",
                "properties": {
                    "month": {
                        "type": "string",
                        "description": "Month as YYYY-MM. Defaults to the current month."
                    },
                    "use_net": USE_NET_PARAM,
                    "week_start": {
                        "type": "string",
                        "enum": ["sunday", "monday"],
                        "description": "First day of the week. Defaults to sunday."
                    },
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_goal_plan",
            description="Get savings goals with progress, schedule, estimated time to completion and upcoming planned payments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "goal_id": {
                        "type": "string",
                        "description": "Optional: only report this goal"
                    },
                    "max_payments": {
                        "type": "integer",
                        "description": "Number of upcoming payments to list per goal. Defaults to 10."
                    },
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="set_job_override",
            description="Override one pay period of a job with an exact amount or, for hourly jobs, the hours actually worked. An amount takes precedence over hours. Giving neither clears the override.",
            inputSchema={
                "type": "object",
                "properties": {
                    "job_id": {"type": "string", "description": "Id of the job"},
                    "pay_date": DATE_PARAM,
                    "amount": {"type": "number", "description": "Gross amount paid on that date"},
                    "hours": {"type": "number", "description": "Hours worked in that period (hourly jobs)"},
                    "profile": PROFILE_PARAM
                },
                "required": ["job_id", "pay_date"]
            }
        ),
        Tool(
            name="clear_job_override",
            description="Remove the override of one pay period of a job so the projected amount is used again.",
            inputSchema={
                "type": "object",
                "properties": {
                    "job_id": {"type": "string", "description": "Id of the job"},
                    "pay_date": DATE_PARAM,
                    "profile": PROFILE_PARAM
                },
                "required": ["job_id", "pay_date"]
            }
        ),
        Tool(
            name="add_goal_money",
            description="Add money to a savings goal. The amount is capped at what is left and consumes the earliest planned payments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "goal_id": {"type": "string", "description": "Id of the goal"},
                    "amount": {"type": "number", "description": "Amount to add, greater than 0"},
                    "profile": PROFILE_PARAM
                },
                "required": ["goal_id", "amount"]
            }
        ),
        Tool(
            name="remove_goal_money",
            description="Remove money from a savings goal. The amount is capped at what is saved and is returned to the latest planned payments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "goal_id": {"type": "string", "description": "Id of the goal"},
                    "amount": {"type": "number", "description": "Amount to remove, greater than 0"},
                    "profile": PROFILE_PARAM
                },
                "required": ["goal_id", "amount"]
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        cj_tools = get_tools()
        profile = arguments.get("profile")

        if name == "list_profiles":
            result = cj_tools.list_profiles()
        elif name == "reload_profiles":
            result = cj_tools.reload_profiles()
        elif name == "get_income_summary":
            result = cj_tools.get_income_summary(arguments.get("use_net", False), profile)
        elif name == "get_month_calendar":
            result = cj_tools.get_month_calendar(
                arguments.get("month"),
                arguments.get("use_net", False),
                arguments.get("week_start", "sunday"),
                profile
            )
        elif name == "get_goal_plan":
            result = cj_tools.get_goal_plan(
                arguments.get("goal_id"),
                arguments.get("max_payments", 10),
                profile
            )
        elif name == "set_job_override":
            result = cj_tools.set_job_override(
                arguments["job_id"],
                arguments["pay_date"],
                arguments.get("amount"),
                arguments.get("hours"),
                profile
            )
        elif name == "clear_job_override":
            result = cj_tools.clear_job_override(arguments["job_id"], arguments["pay_date"], profile)
        elif name == "add_goal_money":
            result = cj_tools.add_goal_money(arguments["goal_id"], arguments["amount"], profile)
        elif name == "remove_goal_money":
            result = cj_tools.remove_goal_money(arguments["goal_id"], arguments["amount"], profile)
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
