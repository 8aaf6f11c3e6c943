from __future__ import annotations

import unittest
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from mini_n1ql.core.models import row_to_entity
from mini_n1ql.core.query_method import Page, QueryMethod, ResultShape, Slice, classify_return


@dataclass
class Route:
    id: Optional[str] = field(default=None, metadata={"id": True})
    stops: int = 0


def list_routes() -> List[Route]: ...
def builtin_list_routes() -> list[Route]: ...
def sequence_routes() -> Sequence[Route]: ...
def tuple_routes() -> Tuple[Route, ...]: ...
def set_routes() -> Set[Route]: ...
def one_route() -> Route: ...
def maybe_route() -> Optional[Route]: ...
def union_route() -> Route | None: ...
def route_iterator() -> Iterator[Route]: ...
def route_iterable() -> Iterable[Route]: ...
def route_generator() -> Generator[Route, None, None]: ...
def route_page() -> Page[Route]: ...
def route_slice() -> Slice[Route]: ...
def count_routes() -> int: ...
def unannotated(): ...
def route_rows() -> List[Dict[str, Any]]: ...
def route_mapping() -> Mapping[str, Any]: ...


class ClassifyReturnTests(unittest.TestCase):
    def test_from_function_shapes(self) -> None:
        cases = [
            (list_routes, ResultShape.COLLECTION, Route),
            (builtin_list_routes, ResultShape.COLLECTION, Route),
            (sequence_routes, ResultShape.COLLECTION, Route),
            (tuple_routes, ResultShape.COLLECTION, Route),
            (set_routes, ResultShape.COLLECTION, Route),
            (one_route, ResultShape.ENTITY, Route),
            (maybe_route, ResultShape.ENTITY, Route),
            (union_route, ResultShape.ENTITY, Route),
            (route_iterator, ResultShape.STREAM, Route),
            (route_iterable, ResultShape.STREAM, Route),
            (route_generator, ResultShape.STREAM, Route),
            (route_page, ResultShape.PAGE, Route),
            (route_slice, ResultShape.SLICE, Route),
            (count_routes, ResultShape.ENTITY, int),
            (unannotated, ResultShape.COLLECTION, Route),
        ]

        for fn, shape, result_type in cases:
            with self.subTest(fn=fn.__name__):
                method = QueryMethod.from_function(fn, Route)
                self.assertEqual(method.name, fn.__name__)
                self.assertIs(method.entity_type, Route)
                self.assertIs(method.shape, shape)
                self.assertIs(method.result_type, result_type)

    def test_bare_list_uses_entity_type(self) -> None:
        self.assertEqual(classify_return(list, Route), (ResultShape.COLLECTION, Route))

    def test_mapping_rows_keep_their_structure(self) -> None:
        rows = QueryMethod.from_function(route_rows, Route)
        single = QueryMethod.from_function(route_mapping, Route)

        self.assertIs(rows.shape, ResultShape.COLLECTION)
        self.assertEqual(row_to_entity(rows.result_type, {"stops": 3}), {"stops": 3})
        self.assertIs(single.shape, ResultShape.ENTITY)
        self.assertEqual(row_to_entity(single.result_type, {"stops": 3}), {"stops": 3})

    def test_unresolvable_return_annotation_raises(self) -> None:
        @dataclass
        class LocalRoute:
            id: Optional[str] = field(default=None, metadata={"id": True})

        def find_first_by_id(key: str) -> Optional[LocalRoute]: ...

        with self.assertRaises(TypeError):
            QueryMethod.from_function(find_first_by_id, LocalRoute)

    def test_unresolvable_parameter_with_plain_return(self) -> None:
        def find_by_id(key: "MissingKeyType") -> int:  # noqa: F821
            ...

        find_by_id.__annotations__["return"] = int
        method = QueryMethod.from_function(find_by_id, Route)
        self.assertIs(method.shape, ResultShape.ENTITY)
        self.assertIs(method.result_type, int)


class QueryMethodTests(unittest.TestCase):
    def test_boolean_views(self) -> None:
        expectations = {
            ResultShape.ENTITY: "is_query_for_entity",
            ResultShape.COLLECTION: "is_collection_query",
            ResultShape.STREAM: "is_stream_query",
            ResultShape.PAGE: "is_page_query",
            ResultShape.SLICE: "is_slice_query",
        }
        flags = list(expectations.values())

        for shape, expected in expectations.items():
            with self.subTest(shape=shape):
                method = QueryMethod("m", Route, shape=shape)
                for flag in flags:
                    self.assertEqual(getattr(method, flag), flag == expected)
                self.assertFalse(method.is_modifying_query)

    def test_shape_accepts_string_and_result_type_defaults(self) -> None:
        method = QueryMethod("m", Route, shape="stream", modifying=True)
        self.assertIs(method.shape, ResultShape.STREAM)
        self.assertIs(method.result_type, Route)
        self.assertTrue(method.is_modifying_query)

    def test_invalid_inputs(self) -> None:
        with self.assertRaises(ValueError):
            QueryMethod("", Route)
        with self.assertRaises(ValueError):
            QueryMethod("m", Route, shape="table")


if __name__ == "__main__":
    unittest.main()
