"""Contracts shared by the action engine and its collaborators.

The contracts package defines:
- the closed enum registries (`action_enums.py`)
- the schema descriptors of the action resource (`action_schema.py`)
- the error taxonomy (`errors.py`)
- Protocol definitions for the attribute store and remote client
- TypedDict definitions for the action wire format

Main exports:
- EnumDomain, encode, decode
- ACTION_SCHEMA, OPERATION_SCHEMA, OPGROUP_SCHEMA
- ValidationError, InvalidEnumValue, ImmutableFieldChanged, NotFound, RemoteError
"""

from contracts import action_enums
from contracts import action_schema
from contracts import errors

# Explicit re-exports to satisfy ruff F401
__all__ = [
    "ACTION_SCHEMA",
    "OPERATION_SCHEMA",
    "OPGROUP_SCHEMA",
    "ActionResourceError",
    "EnumDomain",
    "ImmutableFieldChanged",
    "InvalidEnumValue",
    "NotFound",
    "RegistryMismatchError",
    "RemoteError",
    "ValidationError",
    "decode",
    "encode",
]

# Re-export for convenience
EnumDomain = action_enums.EnumDomain
encode = action_enums.encode
decode = action_enums.decode

ACTION_SCHEMA = action_schema.ACTION_SCHEMA
OPERATION_SCHEMA = action_schema.OPERATION_SCHEMA
OPGROUP_SCHEMA = action_schema.OPGROUP_SCHEMA

ActionResourceError = errors.ActionResourceError
ValidationError = errors.ValidationError
InvalidEnumValue = errors.InvalidEnumValue
RegistryMismatchError = errors.RegistryMismatchError
ImmutableFieldChanged = errors.ImmutableFieldChanged
NotFound = errors.NotFound
RemoteError = errors.RemoteError
