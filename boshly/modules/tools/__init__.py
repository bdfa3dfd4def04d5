"""
Tools Module - Black Box Interface

Purpose: Expose BOSH operations as MCP tools for agents
Interface: create_mcp_server(services) -> FastMCP, TOOL_DEFINITIONS
Hidden: Tool naming and descriptions

Each tool wraps a service method. Calls run in a worker thread so a slow
bosh process never blocks the event loop, and FastMCP derives the input schema
from the wrapped method signature.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Callable, List

from fastmcp import FastMCP

from boshly.modules.operations import BoshServices

logger = logging.getLogger("boshly.tools")

SERVER_NAME = "boshly"


@dataclass(frozen=True)
class ToolDefinition:
    """Maps an MCP tool to a service method."""

    name: str
    service: str
    method: str
    description: str

    def resolve(self, services: BoshServices) -> Callable:
        return getattr(getattr(services, self.service), self.method)


def threaded(method: Callable) -> Callable:
    """Async wrapper that runs a blocking service method in a worker thread."""

    @functools.wraps(method)
    async def tool(*args, **kwargs):
        return await asyncio.to_thread(method, *args, **kwargs)

    return tool


TOOL_DEFINITIONS: List[ToolDefinition] = [
    # Deployments
    ToolDefinition("list_deployments", "deployments", "list_deployments",
                   "List all BOSH deployments"),
    ToolDefinition("get_deployment", "deployments", "get_deployment",
                   "Get detailed information about a BOSH deployment"),
    ToolDefinition("deploy_deployment", "deployments", "deploy_deployment",
                   "Deploy a BOSH deployment from a manifest file"),
    ToolDefinition("update_deployment", "deployments", "update_deployment",
                   "Update a BOSH deployment configuration from a manifest file"),
    ToolDefinition("delete_deployment", "deployments", "delete_deployment",
                   "Delete a BOSH deployment"),
    ToolDefinition("recreate_deployment", "deployments", "recreate_deployment",
                   "Recreate all VMs in a BOSH deployment"),
    # VMs
    ToolDefinition("list_vms", "vms", "list_vms", "List all VMs in a BOSH deployment"),
    ToolDefinition("get_vm_status", "vms", "get_vm_status",
                   "Get status and details of VMs in a BOSH deployment"),
    ToolDefinition("start_vm", "vms", "start_vm", "Start a VM in a BOSH deployment"),
    ToolDefinition("stop_vm", "vms", "stop_vm", "Stop a VM in a BOSH deployment"),
    ToolDefinition("restart_vm", "vms", "restart_vm", "Restart a VM in a BOSH deployment"),
    ToolDefinition("recreate_vm", "vms", "recreate_vm", "Recreate a VM in a BOSH deployment"),
    # Logs
    ToolDefinition("get_deployment_logs", "logs", "get_deployment_logs",
                   "Get logs from a BOSH deployment"),
    ToolDefinition("get_vm_logs", "logs", "get_vm_logs",
                   "Get logs from a specific VM in a BOSH deployment"),
    ToolDefinition("get_task_logs", "logs", "get_task_logs", "Get debug logs from a BOSH task"),
    ToolDefinition("stream_logs", "logs", "stream_logs",
                   "Follow logs from a BOSH deployment until the call times out"),
    # Errands
    ToolDefinition("list_errands", "errands", "list_errands",
                   "List all errands for a BOSH deployment"),
    ToolDefinition("run_errand", "errands", "run_errand", "Run an errand for a BOSH deployment"),
    ToolDefinition("get_errand_status", "errands", "get_errand_status",
                   "Get execution status of an errand task"),
    # Releases
    ToolDefinition("list_releases", "releases", "list_releases",
                   "List all available BOSH releases"),
    ToolDefinition("upload_release", "releases", "upload_release",
                   "Upload a BOSH release from a file path or URL"),
    ToolDefinition("delete_release", "releases", "delete_release",
                   "Delete a BOSH release, optionally a single version"),
    ToolDefinition("get_release_versions", "releases", "get_release_versions",
                   "Get uploaded versions of a BOSH release"),
    # Stemcells
    ToolDefinition("list_stemcells", "stemcells", "list_stemcells",
                   "List all available BOSH stemcells"),
    ToolDefinition("upload_stemcell", "stemcells", "upload_stemcell",
                   "Upload a BOSH stemcell from a file path or URL"),
    ToolDefinition("delete_stemcell", "stemcells", "delete_stemcell",
                   "Delete a BOSH stemcell, optionally a single version"),
    # Cloud config
    ToolDefinition("get_cloud_config", "cloud_config", "get_cloud_config",
                   "Get current BOSH cloud config"),
    ToolDefinition("update_cloud_config", "cloud_config", "update_cloud_config",
                   "Update BOSH cloud config from a file"),
    ToolDefinition("get_cloud_config_diff", "cloud_config", "get_cloud_config_diff",
                   "Get diff of BOSH cloud config changes against a file"),
    # SSH
    ToolDefinition("ssh_to_vm", "ssh", "ssh_to_vm",
                   "Get SSH connection information for a VM in a BOSH deployment"),
    ToolDefinition("execute_command_on_vm", "ssh", "execute_command_on_vm",
                   "Execute a command on a VM via SSH"),
]


def create_mcp_server(services: BoshServices) -> FastMCP:
    """Create a FastMCP server with every BOSH operation registered."""
    mcp = FastMCP(SERVER_NAME)
    for definition in TOOL_DEFINITIONS:
        mcp.tool(
            threaded(definition.resolve(services)),
            name=definition.name,
            description=definition.description,
        )
    logger.info(f"Registered {len(TOOL_DEFINITIONS)} BOSH tools")
    return mcp


__all__ = ["TOOL_DEFINITIONS", "ToolDefinition", "create_mcp_server", "threaded"]
