#!/usr/bin/env python3
"""
Vesting Lock CLI

Commands:
- verify: run every vesting lock group of a transaction document
- vested: compute the vested amount for a schedule
- encode-args / decode-args: the 88-byte lock args layout
- encode-data / decode-data: the 32-byte cell data layout
- errors: the result code table
"""

from __future__ import annotations

import json
import logging
import sys

import click
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from vesting_lock.core.config import ConfigurationError, load_config
from vesting_lock.core.config_codec import encode_vesting_args, parse_vesting_config
from vesting_lock.core.exceptions import ErrorCode, VestingLockError, error_for_code
from vesting_lock.core.lock_script import build_vesting_script, verify_transaction
from vesting_lock.core.logging_config import setup_logging_from_config
from vesting_lock.core.state_codec import encode_vesting_data, parse_vesting_state
from vesting_lock.core.transaction import load_transaction
from vesting_lock.core.units import format_hex, parse_hex
from vesting_lock.core.vesting_calculator import calculate_vested_amount

logger = logging.getLogger(__name__)
console = Console()

U64 = click.IntRange(min=0, max=(1 << 64) - 1)


def _cli_fail(exc: Exception, exit_code: int = 1) -> None:
    """Centralized CLI error handler for consistent messaging."""
    logger.error("CLI error: %s", exc, exc_info=True)
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(exit_code)


def _parse_hash(value: str, name: str) -> bytes:
    raw = parse_hex(value, name)
    if len(raw) != 32:
        raise click.BadParameter(f"must be 32 bytes, got {len(raw)}", param_hint=name)
    return raw


@click.group()
@click.option("--json-output", "json_output", is_flag=True, help="Print machine-readable JSON.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool):
    """Vesting lock script tools."""
    try:
        config = load_config()
    except ConfigurationError as exc:
        _cli_fail(exc)
    setup_logging_from_config(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["json_output"] = json_output


@cli.command("verify")
@click.argument("tx_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def verify(ctx: click.Context, tx_file: str):
    """Verify every vesting lock group in TX_FILE (JSON or YAML). Exits with the result code."""
    try:
        transaction = load_transaction(tx_file)
    except (OSError, ValueError, KeyError, TypeError, yaml.YAMLError) as exc:
        _cli_fail(exc)

    verdict = verify_transaction(transaction, ctx.obj["config"])

    if ctx.obj["json_output"]:
        click.echo(
            json.dumps(
                {
                    "code": verdict.code,
                    "groups": [
                        {"lock_hash": r.lock_hash, "code": r.code, "error": r.error_name}
                        for r in verdict.results
                    ],
                },
                indent=2,
            )
        )
    elif not verdict.results:
        console.print("[yellow]No vesting lock groups in transaction[/]")
    else:
        table = Table(title="Vesting Lock Groups", box=box.ROUNDED)
        table.add_column("Lock Hash", style="cyan")
        table.add_column("Code", justify="right")
        table.add_column("Result")
        for result in verdict.results:
            status = "[green]OK[/]" if result.ok else f"[red]{result.error_name}[/]"
            table.add_row(result.lock_hash, str(result.code), status)
        console.print(table)

    ctx.exit(verdict.code)


@cli.command("vested")
@click.option("--start", "start_epoch", type=U64, required=True)
@click.option("--end", "end_epoch", type=U64, required=True)
@click.option("--cliff", "cliff_epoch", type=U64, required=True)
@click.option("--total", "total_amount", type=U64, required=True)
@click.option("--epoch", "current_epoch", type=U64, required=True)
@click.option("--creator-claimed", type=U64, default=0, show_default=True)
@click.pass_context
def vested(ctx, start_epoch, end_epoch, cliff_epoch, total_amount, current_epoch, creator_claimed):
    """Compute the vested amount at an epoch."""
    amount = calculate_vested_amount(
        current_epoch, start_epoch, end_epoch, cliff_epoch, total_amount, creator_claimed
    )
    if ctx.obj["json_output"]:
        click.echo(json.dumps({"vested": amount, "unvested": total_amount - min(amount, total_amount)}))
    else:
        console.print(f"Vested: [bold green]{amount}[/] of {total_amount}")


@cli.command("encode-args")
@click.argument("creator_lock_hash")
@click.argument("beneficiary_lock_hash")
@click.argument("start_epoch", type=U64)
@click.argument("end_epoch", type=U64)
@click.argument("cliff_epoch", type=U64)
@click.pass_context
def encode_args(ctx, creator_lock_hash, beneficiary_lock_hash, start_epoch, end_epoch, cliff_epoch):
    """Encode lock args and print the resulting vesting lock script."""
    args = encode_vesting_args(
        _parse_hash(creator_lock_hash, "creator_lock_hash"),
        _parse_hash(beneficiary_lock_hash, "beneficiary_lock_hash"),
        start_epoch,
        end_epoch,
        cliff_epoch,
    )
    script = build_vesting_script(args, ctx.obj["config"])
    if ctx.obj["json_output"]:
        click.echo(json.dumps({"lock": script.to_dict(), "lock_hash": format_hex(script.hash())}, indent=2))
    else:
        console.print(f"[cyan]args[/]      {format_hex(args)}")
        console.print(f"[cyan]lock hash[/] {format_hex(script.hash())}")


@cli.command("decode-args")
@click.argument("args_hex")
@click.pass_context
def decode_args(ctx, args_hex):
    """Decode and validate lock args."""
    try:
        config = parse_vesting_config(parse_hex(args_hex, "args"))
    except (ValueError, VestingLockError) as exc:
        _cli_fail(exc, int(getattr(exc, "code", 1)))
    fields = {
        "creator_lock_hash": format_hex(config.creator_lock_hash),
        "beneficiary_lock_hash": format_hex(config.beneficiary_lock_hash),
        "start_epoch": config.start_epoch,
        "end_epoch": config.end_epoch,
        "cliff_epoch": config.cliff_epoch,
    }
    _print_fields(ctx, "Vesting Config", fields)


@cli.command("encode-data")
@click.argument("total_amount", type=U64)
@click.argument("beneficiary_claimed", type=U64)
@click.argument("creator_claimed", type=U64)
@click.argument("highest_block_seen", type=U64)
def encode_data(total_amount, beneficiary_claimed, creator_claimed, highest_block_seen):
    """Encode vesting cell data."""
    click.echo(format_hex(encode_vesting_data(total_amount, beneficiary_claimed, creator_claimed, highest_block_seen)))


@cli.command("decode-data")
@click.argument("data_hex")
@click.pass_context
def decode_data(ctx, data_hex):
    """Decode vesting cell data."""
    try:
        state = parse_vesting_state(parse_hex(data_hex, "data"))
    except (ValueError, VestingLockError) as exc:
        _cli_fail(exc, int(getattr(exc, "code", 1)))
    fields = {
        "total_amount": state.total_amount,
        "beneficiary_claimed": state.beneficiary_claimed,
        "creator_claimed": state.creator_claimed,
        "highest_block_seen": state.highest_block_seen,
    }
    _print_fields(ctx, "Vesting State", fields)


@cli.command("errors")
@click.pass_context
def errors(ctx):
    """List result codes."""
    rows = [(int(code), code.name, error_for_code(code).__name__) for code in ErrorCode]
    if ctx.obj["json_output"]:
        click.echo(json.dumps([{"code": c, "name": n, "category": k} for c, n, k in rows], indent=2))
        return
    table = Table(title="Result Codes", box=box.ROUNDED)
    table.add_column("Code", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="green")
    for code, name, category in rows:
        table.add_row(str(code), name, category)
    console.print(table)


def _print_fields(ctx: click.Context, title: str, fields: dict) -> None:
    if ctx.obj["json_output"]:
        click.echo(json.dumps(fields, indent=2))
        return
    table = Table(title=title, show_header=False, box=box.ROUNDED)
    for key, value in fields.items():
        table.add_row(f"[cyan]{key}", str(value))
    console.print(table)


def main():
    """CLI entry point."""
    return cli(obj={})


if __name__ == "__main__":
    sys.exit(main() or 0)
