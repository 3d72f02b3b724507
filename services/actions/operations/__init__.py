"""Built-in operation kinds.

Import modules here so registration works in static contexts.
"""

from services.actions.operations import command as _command
from services.actions.operations import host as _host
from services.actions.operations import host_group as _host_group
from services.actions.operations import inventory as _inventory
from services.actions.operations import message as _message
from services.actions.operations import template as _template

__all__ = ["_command", "_host", "_host_group", "_inventory", "_message", "_template"]
