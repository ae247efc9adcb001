from __future__ import annotations

import logging
import typing as t
from abc import ABC, abstractmethod

from ._models import ComparisonFailure, ComparisonResult

logger = logging.getLogger("reqsnap")

PRINTERS = t.Literal["rich", "list", "logger"]


class Titles:
    index: t.Final = "Request (#)"
    field: t.Final = "Field"
    expected: t.Final = "Expected"
    actual: t.Final = "Actual"
    reason: t.Final = "Reason"


def _format_index(failure: ComparisonFailure) -> str:
    return "-" if failure.index is None else str(failure.index)


def _format_value(val: t.Any, color: str | None = None, missing: str = "<missing>") -> str:
    cur = missing if val is None else str(val)

    if color:
        cur = f"[{color}]{cur}[/{color}]"

    return cur


def _as_failures(result: ComparisonResult) -> list[ComparisonFailure]:
    if isinstance(result, ComparisonFailure):
        return [result]

    return []


class BasePrinter(ABC):
    @abstractmethod
    def print_failures(self, title: str, failures: list[ComparisonFailure]) -> None:
        pass


class RichPrinter(BasePrinter):
    def print_failures(self, title: str, failures: list[ComparisonFailure]) -> None:
        # Dynamic import so importing reqsnap stays cheap for tests that never print
        from rich.console import Console
        from rich.table import Table

        console = Console()

        if not failures:
            console.print(f"[green]{title}: all requests matched[/green]")
            return

        table = Table(title=f"{title} [red]({len(failures):,} mismatches)[/red]")

        table.add_column(Titles.index, justify="right")
        table.add_column(Titles.field, overflow="fold")
        table.add_column(Titles.expected, overflow="fold")
        table.add_column(Titles.actual, overflow="fold")
        table.add_column(Titles.reason)

        for failure in failures:
            table.add_row(
                _format_index(failure),
                f"[bold]{failure.field}[/bold]",
                _format_value(failure.expected, "green"),
                _format_value(failure.actual, "red"),
                failure.reason.value,
            )

        console.print(table)


class ListPrinter(BasePrinter):
    def print_failures(self, title: str, failures: list[ComparisonFailure]) -> None:
        print(title)

        if not failures:
            print("  All requests matched")
            return

        PAD_PREFIX: t.Final = 12

        for idx, failure in enumerate(failures, 1):
            print(f"\n{idx}. {failure.message}")
            print(f"{Titles.index}: ".rjust(PAD_PREFIX) + _format_index(failure))
            print(f"{Titles.field}: ".rjust(PAD_PREFIX) + failure.field)
            print(f"{Titles.expected}: ".rjust(PAD_PREFIX) + _format_value(failure.expected))
            print(f"{Titles.actual}: ".rjust(PAD_PREFIX) + _format_value(failure.actual))
            print(f"{Titles.reason}: ".rjust(PAD_PREFIX) + failure.reason.value)


class LoggerPrinter(BasePrinter):
    def print_failures(self, title: str, failures: list[ComparisonFailure]) -> None:
        if not failures:
            logger.info(f"{title}: all requests matched")
            return

        for failure in failures:
            logger.error(f"{title}: {failure.message} ({failure.reason.value})")


def _get_printer(method: PRINTERS) -> BasePrinter | None:
    printer: BasePrinter | None = None
    if method == "rich":
        printer = RichPrinter()
    elif method == "list":
        printer = ListPrinter()
    elif method == "logger":
        printer = LoggerPrinter()

    return printer


def print_failures(failures: t.Iterable[ComparisonFailure], method: PRINTERS, title: str = "ReqSnap") -> None:
    if printer := _get_printer(method):
        printer.print_failures(title, list(failures))


def print_result(result: ComparisonResult, method: PRINTERS, title: str = "ReqSnap") -> None:
    if printer := _get_printer(method):
        printer.print_failures(title, _as_failures(result))
