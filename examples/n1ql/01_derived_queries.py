"""Derived queries against an in-process operations port that prints requests."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "mini_n1ql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mini_n1ql import (
    N1qlQuery,
    Page,
    QueryOptions,
    QueryRequest,
    UnsupportedQueryOperation,
    row_to_entity,
)


@dataclass
class Airline:
    id: Optional[str] = field(default=None, metadata={"id": True})
    name: str = ""
    country: str = ""
    callsign: Optional[str] = None


class PrintingOperations:
    """Stand-in port that echoes each request and answers with fixed rows."""

    keyspace = "`travel-sample`.`inventory`.`airline`"

    def __init__(self, rows: List[dict]):
        self.rows = rows

    def run(self, query: QueryRequest, target_type: Any) -> List[Any]:
        print(f"  [{query.mode.value}] {query.statement}")
        print(f"  values={query.values} options={query.options}")
        return [row_to_entity(target_type, row) for row in self.rows]

    def prepare(self, statement, name=None):
        raise NotImplementedError


def find_by_country(country: str) -> List[Airline]: ...
def find_first_by_name(name: str) -> Optional[Airline]: ...
def stream_all_order_by_name() -> Iterator[Airline]: ...
def find_all_paged() -> Page[Airline]: ...


def main() -> None:
    ops = PrintingOperations(
        [
            {"_ID": "airline_137", "_CAS": 1, "name": "Air France", "country": "France"},
            {"_ID": "airline_1191", "_CAS": 2, "name": "Air Austral", "country": "France"},
        ]
    )

    print("Collection query:")
    by_country = N1qlQuery.for_method(find_by_country, ops, entity_type=Airline)
    print(by_country.execute(["France", QueryOptions(scan_consistency="request_plus")]))

    print("Single entity query:")
    first = N1qlQuery.for_method(find_first_by_name, ops, entity_type=Airline)
    print(first.execute(["Air France"]))

    print("Stream query:")
    stream = N1qlQuery.for_method(stream_all_order_by_name, ops, entity_type=Airline)
    for airline in stream.execute():
        print("  ->", airline.name)

    print("Page query is rejected before reaching the port:")
    paged = N1qlQuery.for_method(find_all_paged, ops, entity_type=Airline)
    try:
        paged.execute()
    except UnsupportedQueryOperation as exc:
        print("  Expected error:", exc)


if __name__ == "__main__":
    main()
