from __future__ import annotations

import unittest

from mini_n1ql.core.conditions import C, Condition, ConditionGroup, OrderBy
from mini_n1ql.core.dialect import N1qlDialect
from mini_n1ql.core.query_builder import (
    PlaceholderCounter,
    compile_limit,
    compile_order_by,
    compile_where,
)


class ConditionsTests(unittest.TestCase):
    def test_operator_validation(self) -> None:
        Condition("age", ">=")
        Condition("email", "IS MISSING", is_unary=True)
        with self.assertRaises(ValueError):
            Condition("a", "~")
        with self.assertRaises(ValueError):
            Condition("a", "IS WEIRD", is_unary=True)
        with self.assertRaises(ValueError):
            Condition("a", "IS NULL")

    def test_group_factory_methods(self) -> None:
        group_and = C.and_(Condition("age", "="), Condition("email", "="))
        group_or = C.or_([Condition("age", "="), Condition("age", ">")])

        self.assertIsInstance(group_and, ConditionGroup)
        self.assertEqual(group_and.operator, "AND")
        self.assertEqual(len(group_and.items), 2)
        self.assertEqual(group_or.operator, "OR")
        self.assertEqual(len(group_or.items), 2)

    def test_group_factory_validation(self) -> None:
        with self.assertRaises(ValueError):
            C.and_()
        with self.assertRaises(TypeError):
            C.or_(123)  # type: ignore[arg-type]


class QueryBuilderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.d = N1qlDialect()

    def test_compile_where_with_none_and_empty_list(self) -> None:
        for where in (None, []):
            with self.subTest(where=where):
                self.assertEqual(compile_where(where, self.d), "")

    def test_compile_where_binary(self) -> None:
        self.assertEqual(compile_where(Condition("age", "="), self.d), "`d`.`age` = $1")

    def test_compile_where_list_joins_with_and(self) -> None:
        sql = compile_where(
            [
                Condition("age", "="),
                Condition("email", "IS NOT NULL", is_unary=True),
                Condition("role", "IN"),
            ],
            self.d,
        )
        self.assertEqual(
            sql, "`d`.`age` = $1 AND `d`.`email` IS NOT NULL AND `d`.`role` IN $2"
        )

    def test_compile_nested_groups(self) -> None:
        where = C.or_(
            C.and_(Condition("age", ">="), Condition("age", "<")),
            Condition("score", "BETWEEN"),
        )
        self.assertEqual(
            compile_where(where, self.d, alias="h"),
            "((`h`.`age` >= $1 AND `h`.`age` < $2) OR `h`.`score` BETWEEN $3 AND $4)",
        )

    def test_string_helpers(self) -> None:
        sql = compile_where(
            [
                Condition("name", "STARTS_WITH"),
                Condition("name", "ENDS_WITH"),
                Condition("name", "CONTAINS"),
            ],
            self.d,
        )
        self.assertEqual(
            sql,
            '`d`.`name` LIKE $1 || "%" AND `d`.`name` LIKE "%" || $2 '
            "AND CONTAINS(`d`.`name`, $3)",
        )

    def test_shared_counter_continues_numbering(self) -> None:
        counter = PlaceholderCounter()
        first = compile_where(Condition("a", "="), self.d, counter=counter)
        second = compile_where(Condition("b", "BETWEEN"), self.d, counter=counter)

        self.assertEqual(first, "`d`.`a` = $1")
        self.assertEqual(second, "`d`.`b` BETWEEN $2 AND $3")
        self.assertEqual(counter.used, 3)

    def test_raw_expression(self) -> None:
        sql = compile_where(Condition("META(`d`).id", "=", raw=True), self.d)
        self.assertEqual(sql, "META(`d`).id = $1")

    def test_compile_order_by(self) -> None:
        self.assertEqual(compile_order_by(None, self.d), "")
        self.assertEqual(
            compile_order_by([OrderBy("age", desc=True), OrderBy("name")], self.d),
            " ORDER BY `d`.`age` DESC, `d`.`name` ASC",
        )
        self.assertEqual(
            compile_order_by([OrderBy("META(`d`).id", raw=True)], self.d),
            " ORDER BY META(`d`).id ASC",
        )

    def test_compile_limit(self) -> None:
        self.assertEqual(compile_limit(None), "")
        self.assertEqual(compile_limit(5), " LIMIT 5")
        with self.assertRaises(ValueError):
            compile_limit(0)


class DialectTests(unittest.TestCase):
    def setUp(self) -> None:
        self.d = N1qlDialect()

    def test_quoting_and_placeholders(self) -> None:
        self.assertEqual(self.d.q("travel-sample"), "`travel-sample`")
        self.assertEqual(self.d.placeholder(3), "$3")
        with self.assertRaises(ValueError):
            self.d.q("bad`name")
        with self.assertRaises(ValueError):
            self.d.q("")
        with self.assertRaises(ValueError):
            self.d.placeholder(0)

    def test_keyspace(self) -> None:
        self.assertEqual(self.d.keyspace("travel-sample"), "`travel-sample`")
        self.assertEqual(
            self.d.keyspace("travel-sample", "inventory", "hotel"),
            "`travel-sample`.`inventory`.`hotel`",
        )
        with self.assertRaises(ValueError):
            self.d.keyspace("travel-sample", "inventory")

    def test_type_filter_and_select(self) -> None:
        self.assertEqual(self.d.type_filter('say "hi"'), '`d`.`type` = "say \\"hi\\""')
        self.assertEqual(
            self.d.select_entity("`b`", alias="x"),
            "SELECT META(`x`).id AS _ID, META(`x`).cas AS _CAS, `x`.* FROM `b` AS `x`",
        )


if __name__ == "__main__":
    unittest.main()
