"""UI module for the agent runtime.

The CLI can be run directly:
    python -m agent_runtime.ui.cli validate "Your input here"

Note: CLI components are not exported here so the module can run as a script.
"""

__all__ = []  # CLI is run directly, no exports needed
