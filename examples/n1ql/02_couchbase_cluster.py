"""Couchbase cluster example (optional dependency).

Connection settings come from MINI_N1QL_* environment variables. The
credentials MINI_N1QL_USERNAME and MINI_N1QL_PASSWORD are required; others
such as MINI_N1QL_CONNECTION_STRING, MINI_N1QL_BUCKET=travel-sample,
MINI_N1QL_SCOPE=inventory and MINI_N1QL_COLLECTION=airline are optional.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "mini_n1ql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mini_n1ql import (
    CouchbaseOperations,
    CouchbaseSettings,
    N1qlQuery,
    QueryOptions,
    ScanConsistency,
)


@dataclass
class Airline:
    id: Optional[str] = field(default=None, metadata={"id": True})
    name: str = ""
    country: str = ""
    iata: Optional[str] = None


def find_top5_by_country_order_by_name(country: str) -> List[Airline]: ...
def count_by_country(country: str) -> int: ...


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    try:
        ops = CouchbaseOperations.connect(CouchbaseSettings())
    except ImportError as exc:
        print("Couchbase example skipped:", exc)
        print("Install dependency: pip install couchbase")
        return

    with ops:
        options = QueryOptions(scan_consistency=ScanConsistency.REQUEST_PLUS, timeout=5)

        top = N1qlQuery.for_method(find_top5_by_country_order_by_name, ops, entity_type=Airline)
        for airline in top.execute(["United States", options]):
            print(airline)

        count = N1qlQuery.for_method(count_by_country, ops, entity_type=Airline)
        print("Airlines in France:", count.execute(["France"]))

        # Prepared plan: the statement is parsed once on the query service.
        plan = ops.prepare(top.statement_supplier.supply())
        print("Prepared plan:", plan.name)
        print(top.execute(["France", plan]))


if __name__ == "__main__":
    main()
