from __future__ import annotations

import unittest
from dataclasses import dataclass, field
from typing import Iterator, List, Optional
from unittest.mock import MagicMock

from mini_n1ql.core.errors import UnsupportedQueryOperation
from mini_n1ql.core.n1ql_query import N1qlQuery
from mini_n1ql.core.options import PreparedPlan, QueryOptions
from mini_n1ql.core.query_method import Page, QueryMethod, ResultShape, Slice
from mini_n1ql.core.query_request import QueryMode
from mini_n1ql.core.statements import (
    DerivedStatementSupplier,
    LiteralStatementSupplier,
    Statement,
    TemplateStatementSupplier,
)


@dataclass
class Airline:
    id: Optional[str] = field(default=None, metadata={"id": True})
    name: str = ""
    country: str = ""


def _operations(rows: list | None = None) -> MagicMock:
    operations = MagicMock()
    operations.keyspace = "`travel-sample`"
    operations.run.return_value = list(rows or [])
    return operations


def _query(shape: ResultShape, operations: MagicMock, *, modifying: bool = False) -> N1qlQuery:
    method = QueryMethod("find_by_name", Airline, shape=shape, modifying=modifying)
    supplier = LiteralStatementSupplier("SELECT * FROM `travel-sample` WHERE name = $1")
    return N1qlQuery(method, operations, supplier)


class ResultShapeTests(unittest.TestCase):
    def test_collection_returns_full_list(self) -> None:
        rows = [Airline("a1", "Air A"), Airline("a2", "Air B")]
        operations = _operations(rows)

        result = _query(ResultShape.COLLECTION, operations).execute(["Air"])

        self.assertEqual(result, rows)
        self.assertIsInstance(result, list)
        operations.run.assert_called_once()
        request, target_type = operations.run.call_args.args
        self.assertEqual(request.mode, QueryMode.PARAMETRIZED)
        self.assertEqual(request.values, ("Air",))
        self.assertIs(target_type, Airline)

    def test_collection_with_no_rows_is_empty_list(self) -> None:
        result = _query(ResultShape.COLLECTION, _operations([])).execute(["x"])
        self.assertEqual(result, [])

    def test_entity_returns_first_row(self) -> None:
        rows = [Airline("a1", "first"), Airline("a2", "second")]
        result = _query(ResultShape.ENTITY, _operations(rows)).execute(["x"])
        self.assertEqual(result, rows[0])

    def test_entity_without_rows_returns_none(self) -> None:
        result = _query(ResultShape.ENTITY, _operations([])).execute(["x"])
        self.assertIsNone(result)

    def test_stream_yields_same_rows_once(self) -> None:
        rows = [Airline("a1"), Airline("a2"), Airline("a3")]

        collection = _query(ResultShape.COLLECTION, _operations(rows)).execute(["x"])
        stream = _query(ResultShape.STREAM, _operations(rows)).execute(["x"])

        self.assertIsInstance(stream, Iterator)
        self.assertEqual(list(stream), collection)
        self.assertEqual(list(stream), [])
        with self.assertRaises(StopIteration):
            next(stream)

    def test_unsupported_shapes_fail_before_running(self) -> None:
        cases = [
            ("page", ResultShape.PAGE, False),
            ("slice", ResultShape.SLICE, False),
            ("modifying", ResultShape.COLLECTION, True),
        ]
        for name, shape, modifying in cases:
            with self.subTest(name=name):
                operations = _operations([Airline("a1")])
                query = _query(shape, operations, modifying=modifying)

                with self.assertRaises(UnsupportedQueryOperation):
                    query.execute(["x"])
                with self.assertRaises(NotImplementedError):
                    query.execute([])
                self.assertEqual(operations.run.call_count, 0)


class ExecuteTests(unittest.TestCase):
    def test_port_errors_propagate_unchanged(self) -> None:
        operations = _operations()
        failure = RuntimeError("index not found")
        operations.run.side_effect = failure

        with self.assertRaises(RuntimeError) as ctx:
            _query(ResultShape.COLLECTION, operations).execute(["x"])
        self.assertIs(ctx.exception, failure)

    def test_stream_errors_raise_on_execute(self) -> None:
        operations = _operations()
        operations.run.side_effect = ConnectionError("down")

        with self.assertRaises(ConnectionError):
            _query(ResultShape.STREAM, operations).execute([])

    def test_each_call_builds_a_fresh_request(self) -> None:
        operations = _operations([])
        query = _query(ResultShape.COLLECTION, operations)

        query.execute(["first"])
        query.execute([])

        first, second = (call.args[0] for call in operations.run.call_args_list)
        self.assertEqual(first.mode, QueryMode.PARAMETRIZED)
        self.assertEqual(second.mode, QueryMode.SIMPLE)
        self.assertIsNot(first, second)

    def test_options_and_plan_reach_the_port(self) -> None:
        operations = _operations([])
        options = QueryOptions(scan_consistency="request_plus")
        plan = PreparedPlan("find_by_name")

        _query(ResultShape.COLLECTION, operations).execute(["x", options, plan])

        request = operations.run.call_args.args[0]
        self.assertEqual(request.mode, QueryMode.PREPARED)
        self.assertIs(request.options, options)
        self.assertIs(request.plan, plan)
        self.assertEqual(request.values, ("x",))

    def test_statement_supplier_is_asked_per_call(self) -> None:
        supplier = MagicMock()
        supplier.supply.return_value = Statement("SELECT 1")
        method = QueryMethod("anything", Airline)
        query = N1qlQuery(method, _operations([]), supplier)

        query.execute()
        query.execute()

        self.assertEqual(supplier.supply.call_count, 2)

    def test_query_method_accessor(self) -> None:
        operations = _operations()
        query = _query(ResultShape.ENTITY, operations)
        self.assertEqual(query.query_method.name, "find_by_name")
        self.assertTrue(query.query_method.is_query_for_entity)

    def test_strict_arguments(self) -> None:
        method = QueryMethod("find", Airline)
        query = N1qlQuery(
            method,
            _operations([]),
            LiteralStatementSupplier("SELECT 1"),
            strict_arguments=True,
        )
        with self.assertRaises(ValueError):
            query.execute([QueryOptions(), QueryOptions()])


def find_by_country(country: str) -> List[Airline]:
    raise NotImplementedError


def find_first_by_name(name: str) -> Optional[Airline]:
    raise NotImplementedError


def stream_all() -> Iterator[Airline]:
    raise NotImplementedError


def find_all_paged() -> Page[Airline]:
    raise NotImplementedError


def find_all_sliced() -> Slice[Airline]:
    raise NotImplementedError


class ForMethodTests(unittest.TestCase):
    def test_derived_collection_method(self) -> None:
        operations = _operations([Airline("a1", country="France")])

        query = N1qlQuery.for_method(find_by_country, operations, entity_type=Airline)
        result = query.execute(["France"])

        self.assertIsInstance(query.statement_supplier, DerivedStatementSupplier)
        self.assertEqual(query.query_method.shape, ResultShape.COLLECTION)
        self.assertEqual(result, [Airline("a1", country="France")])
        request = operations.run.call_args.args[0]
        self.assertIn("`d`.`country` = $1", str(request.statement))
        self.assertIn("FROM `travel-sample` AS `d`", str(request.statement))

    def test_entity_and_stream_methods(self) -> None:
        operations = _operations([Airline("a1"), Airline("a2")])

        entity = N1qlQuery.for_method(find_first_by_name, operations, entity_type=Airline)
        stream = N1qlQuery.for_method(stream_all, operations, entity_type=Airline)

        self.assertEqual(entity.execute(["Air A"]), Airline("a1"))
        self.assertEqual([item.id for item in stream.execute()], ["a1", "a2"])

    def test_template_and_literal_queries(self) -> None:
        operations = _operations([])

        template = N1qlQuery.for_method(
            find_by_country,
            operations,
            entity_type=Airline,
            query="#{select_entity} WHERE #{filter} AND country = $1",
        )
        literal = N1qlQuery.for_method(
            find_by_country,
            operations,
            entity_type=Airline,
            query="SELECT RAW name FROM `travel-sample`",
        )

        self.assertIsInstance(template.statement_supplier, TemplateStatementSupplier)
        self.assertIsInstance(literal.statement_supplier, LiteralStatementSupplier)
        self.assertEqual(
            str(literal.statement_supplier.supply()), "SELECT RAW name FROM `travel-sample`"
        )

    def test_page_slice_and_modifying_methods_are_rejected(self) -> None:
        operations = _operations([])
        paged = N1qlQuery.for_method(find_all_paged, operations, entity_type=Airline, query="SELECT 1")
        sliced = N1qlQuery.for_method(find_all_sliced, operations, entity_type=Airline, query="SELECT 1")
        modifying = N1qlQuery.for_method(
            find_by_country,
            operations,
            entity_type=Airline,
            query="DELETE FROM `travel-sample` WHERE country = $1",
            modifying=True,
        )

        for query in (paged, sliced, modifying):
            with self.subTest(method=query.query_method.name):
                with self.assertRaises(UnsupportedQueryOperation):
                    query.execute(["x"])
        operations.run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
