"""
Config Module - Black Box Interface

Purpose: Resolve the effective BOSH configuration
Interface: ConfigResolver.resolve(), EffectiveConfig, SecretFolderReader
Hidden: Secret folder parsing, field precedence, certificate materialization

Explicit settings always win; the secret folder is a per-field fallback.
"""

from .env_folder import SecretFolderReader, parse_export_lines
from .resolver import ConfigResolver, EffectiveConfig, materialize_certificate, resolve_field

__all__ = [
    "ConfigResolver",
    "EffectiveConfig",
    "SecretFolderReader",
    "materialize_certificate",
    "parse_export_lines",
    "resolve_field",
]
