"""Example usage of the structdiff comparison engine."""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from structdiff import (
    ComparisonConfig,
    ComparisonStrategy,
    StructDiffEngine,
    case_insensitive,
    datetime_within,
    within_precision,
)


@dataclass
class LineItem:
    sku: str
    quantity: int
    unit_price: float


@dataclass(eq=False)
class Invoice:
    id: str
    total: Decimal
    status: str
    created_at: str
    tags: set = field(default_factory=set)
    lines: list = field(default_factory=list)
    attributes: dict = field(default_factory=dict)
    parent: Optional["Invoice"] = None


def build_invoices():
    """Build two invoices as produced by a legacy and a new system."""
    old_invoice = Invoice(
        id="INV-001",
        total=Decimal("100.00"),
        status="PAID",
        created_at="2025-02-02T10:30:00Z",
        tags={"priority", "export"},
        lines=[
            LineItem("WIDGET-001", 5, 10.00),
            LineItem("GADGET-002", 2, 25.50),
        ],
        attributes={"region": "eu", "traceId": "abc123"},
    )
    new_invoice = Invoice(
        id="INV-001",
        total=Decimal("100.00"),
        status="paid",  # Different case
        created_at="2025-02-02T10:30:02Z",  # 2 seconds later
        tags={"export", "priority"},
        lines=[
            LineItem("WIDGET-001", 5, 10.0004),  # Within precision
            LineItem("GADGET-002", 2, 25.50),
        ],
        attributes={"region": "eu", "traceId": "xyz789"},
    )
    # Cycles terminate
    old_invoice.parent = old_invoice
    new_invoice.parent = new_invoice
    return old_invoice, new_invoice


def tolerant_config():
    return (
        ComparisonConfig()
        .ignoring("$.attributes.traceId")
        .with_path_strategy("$.status", case_insensitive())
        .with_path_strategy("$.created_at", datetime_within("5s"))
        .with_path_strategy("$.lines[*].unit_price", within_precision(0.001))
        .with_type_strategy(Decimal, ComparisonStrategy.natural())
    )


def main():
    print("=" * 60)
    print("structdiff Comparison Engine - Example")
    print("=" * 60)

    old_invoice, new_invoice = build_invoices()
    engine = StructDiffEngine(tolerant_config())
    report = engine.report(old_invoice, new_invoice)

    print(f"\nMatch: {report.is_match}")
    print(f"\nSummary:")
    print(f"  Nodes Compared: {report.summary.nodes_compared}")
    print(f"  Differences: {report.summary.differences_found}")
    print(f"  Ignored: {report.summary.paths_ignored}")
    print(f"  Cycles: {report.summary.cycles_short_circuited}")

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps(report.to_dict(), indent=2, default=str))


def example_with_mismatch():
    """Example that demonstrates a mismatch."""
    print("\n" + "=" * 60)
    print("Example with Mismatch")
    print("=" * 60)

    old_invoice, new_invoice = build_invoices()
    new_invoice.lines[1].quantity = 3
    new_invoice.lines.append(LineItem("EXTRA-003", 1, 1.00))
    new_invoice.tags.add("archived")

    engine = StructDiffEngine(tolerant_config())
    differences = engine.compare(old_invoice, new_invoice)

    print(f"\nDifferences found: {len(differences)}")
    for diff in differences:
        print(f"  - [{diff.kind.value}] {diff.path}")
        print(f"    Left: {diff.left_value!r}")
        print(f"    Right: {diff.right_value!r}")


def example_fail_fast():
    """Example stopping at the first difference."""
    print("\n" + "=" * 60)
    print("Example with Fail Fast")
    print("=" * 60)

    old_invoice, new_invoice = build_invoices()
    config = ComparisonConfig(fail_fast=True)
    differences = StructDiffEngine(config).compare(old_invoice, new_invoice)

    for diff in differences:
        print(f"  - [{diff.kind.value}] {diff.path}")


if __name__ == "__main__":
    main()
    example_with_mismatch()
    example_fail_fast()
