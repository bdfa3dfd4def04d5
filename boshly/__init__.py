"""
Boshly - BOSH Director operations for agents

Exposes BOSH lifecycle operations as MCP tools by driving the bosh CLI.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- config: Effective configuration from settings and the secret folder
- installer: bosh CLI discovery and download
- executor: bosh process execution with credential injection
- retry: Fixed-delay retry of transient failures
- health: Startup validation and health probing
- operations: Deployment, VM, log, errand, release, stemcell, cloud config and SSH operations
- tools: MCP tool registration
- api: HTTP payload models
"""

__version__ = "1.0.0"
