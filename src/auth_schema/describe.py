"""Print the assembled auth keyspace as CQL."""

from __future__ import annotations

from argparse import ArgumentParser
from collections.abc import Sequence
from dataclasses import replace

from src.auth_schema.config import load_bootstrap_config
from src.auth_schema.cql import render_keyspace
from src.auth_schema.exceptions import SchemaDefinitionError
from src.auth_schema.registry import initialize_auth_schema
from src.logger import LOGGER


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Describe the auth keyspace schema as CQL.")
    parser.add_argument("--config", help="Path to the YAML node config.")
    parser.add_argument(
        "--replication-factor",
        type=int,
        help="Override the configured default keyspace replication factor.",
    )
    return parser


def describe(config_path: str | None = None, replication_factor: int | None = None) -> str:
    """Return the generation header followed by every CREATE statement."""
    config = load_bootstrap_config(config_path)
    if replication_factor is not None:
        config = replace(config, default_keyspace_rf=replication_factor)
    registry = initialize_auth_schema(config)
    header = f"-- {registry.keyspace.name} generation {registry.generation}"
    return f"{header}\n\n{render_keyspace(registry.keyspace)}"


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        output = describe(args.config, args.replication_factor)
    except (SchemaDefinitionError, ValueError) as exc:
        LOGGER.error("Cannot describe auth keyspace: %s", exc)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
