"""
In-memory transaction model and the ledger query interface.

The lock script never sees a transaction directly. It asks the ledger for
cells, cell data, lock hashes and header dependencies by index, and treats
``IndexOutOfBound`` as the end of each list. ``TransactionView`` serves those
queries from an immutable ``Transaction`` for one active lock script.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Tuple, TypeVar, Union

import yaml

from vesting_lock.core.exceptions import IndexOutOfBound
from vesting_lock.core.script import Script
from vesting_lock.core.units import format_hex, parse_hex, to_u64

T = TypeVar("T")


class Source(Enum):
    INPUT = "input"
    OUTPUT = "output"
    HEADER_DEP = "header_dep"


@dataclass(frozen=True)
class CellOutput:
    capacity: int
    lock: Script


@dataclass(frozen=True)
class Cell:
    """A ledger cell: its output descriptor plus opaque data."""

    output: CellOutput
    data: bytes = b""

    @property
    def lock(self) -> Script:
        return self.output.lock

    @property
    def capacity(self) -> int:
        return self.output.capacity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.capacity,
            "lock": self.lock.to_dict(),
            "data": format_hex(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        if "lock" not in data:
            raise ValueError("Cell is missing required field 'lock'")
        return cls(
            output=CellOutput(
                capacity=to_u64(data.get("capacity", 0), "capacity"),
                lock=Script.from_dict(data["lock"]),
            ),
            data=parse_hex(data.get("data", "0x"), "data"),
        )


@dataclass(frozen=True)
class Header:
    """The part of a block header the lock script reads."""

    number: int
    epoch: int

    def to_dict(self) -> Dict[str, int]:
        return {"number": self.number, "epoch": self.epoch}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Header":
        return cls(
            number=to_u64(data["number"], "number"),
            epoch=to_u64(data["epoch"], "epoch"),
        )


@dataclass(frozen=True)
class Transaction:
    inputs: Tuple[Cell, ...] = field(default_factory=tuple)
    outputs: Tuple[Cell, ...] = field(default_factory=tuple)
    header_deps: Tuple[Header, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(self, "header_deps", tuple(self.header_deps))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": [cell.to_dict() for cell in self.inputs],
            "outputs": [cell.to_dict() for cell in self.outputs],
            "header_deps": [header.to_dict() for header in self.header_deps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        if not isinstance(data, dict):
            raise ValueError("Transaction document must be a mapping")
        return cls(
            inputs=[Cell.from_dict(item) for item in data.get("inputs") or []],
            outputs=[Cell.from_dict(item) for item in data.get("outputs") or []],
            header_deps=[Header.from_dict(item) for item in data.get("header_deps") or []],
        )


def load_transaction(path: Union[str, Path]) -> Transaction:
    """Load a transaction document from a JSON or YAML file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        document = json.loads(text)
    else:
        document = yaml.safe_load(text)
    return Transaction.from_dict(document)


class TransactionView:
    """
    Read-only, index-based access to a transaction for one active lock script.

    Mirrors the ledger syscalls: every loader raises ``IndexOutOfBound`` once
    the index runs past the end of the requested list.
    """

    def __init__(self, transaction: Transaction, script: Script):
        self.transaction = transaction
        self.script = script

    def _cells(self, source: Source) -> Tuple[Cell, ...]:
        if source is Source.INPUT:
            return self.transaction.inputs
        if source is Source.OUTPUT:
            return self.transaction.outputs
        raise ValueError(f"{source} does not hold cells")

    def _cell(self, index: int, source: Source) -> Cell:
        cells = self._cells(source)
        if index < 0 or index >= len(cells):
            raise IndexOutOfBound(details={"index": index, "source": source.value})
        return cells[index]

    def load_script(self) -> Script:
        return self.script

    def load_cell(self, index: int, source: Source) -> CellOutput:
        return self._cell(index, source).output

    def load_cell_data(self, index: int, source: Source) -> bytes:
        return self._cell(index, source).data

    def load_cell_lock_hash(self, index: int, source: Source) -> bytes:
        return self._cell(index, source).lock.hash()

    def load_header(self, index: int, source: Source = Source.HEADER_DEP) -> Header:
        if source is not Source.HEADER_DEP:
            raise ValueError("Headers are only loaded from header dependencies")
        headers = self.transaction.header_deps
        if index < 0 or index >= len(headers):
            raise IndexOutOfBound(details={"index": index, "source": source.value})
        return headers[index]

    def query_iter(self, loader: Callable[[int, Source], T], source: Source) -> Iterator[T]:
        """Yield ``loader(i, source)`` for i = 0, 1, ... until the list is exhausted."""
        index = 0
        while True:
            try:
                item = loader(index, source)
            except IndexOutOfBound:
                return
            yield item
            index += 1

    def query_indexed(self, loader: Callable[[int, Source], T], source: Source) -> Iterator[Tuple[int, T]]:
        return enumerate(self.query_iter(loader, source))


def group_lock_scripts(transaction: Transaction) -> List[Script]:
    """Distinct input lock scripts in first-seen order."""
    seen = set()
    scripts: List[Script] = []
    for cell in transaction.inputs:
        lock_hash = cell.lock.hash()
        if lock_hash not in seen:
            seen.add(lock_hash)
            scripts.append(cell.lock)
    return scripts
