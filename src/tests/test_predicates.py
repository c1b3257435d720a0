"""Access scope to predicate compilation and join derivation."""

from __future__ import annotations

import itertools

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from content.predicates import (
    DENIED,
    MATCH_ALL,
    Condition,
    Group,
    Logic,
    Operator,
    PredicateCompiler,
    iter_conditions,
    joins_for_paths,
    required_joins,
)
from content.scope import AccessScope

PUBLISHED = Condition("is_published", Operator.EQ, True)


def owned_by(user_id, *fields):
    return Group(Logic.OR, tuple(Condition(field, Operator.EQ, user_id) for field in fields))


class PredicateCompilerTests(SimpleTestCase):
    """Every {view_all, view_unpublished, view_own} combination."""

    owner_fields = ("author_id",)

    def setUp(self):
        self.compiler = PredicateCompiler()

    def expected(self, view_all: bool, view_unpublished: bool, view_own: bool):
        if not view_all and not view_own:
            return DENIED
        if view_all and view_unpublished:
            return MATCH_ALL
        if view_all and view_own:
            return Group(Logic.OR, (owned_by(7, "author_id"), PUBLISHED))
        if view_all:
            return PUBLISHED
        return owned_by(7, "author_id")

    def test_branch_table(self):
        """The compiled predicate matches the branch table for all eight scopes."""
        for view_all, view_unpublished, view_own in itertools.product((False, True), repeat=3):
            scope = AccessScope(view_all=view_all, view_unpublished=view_unpublished, view_own=view_own)
            with self.subTest(scope=scope):
                result = self.compiler.compile(scope, self.owner_fields, 7)
                self.assertEqual(result, self.expected(view_all, view_unpublished, view_own))

    def test_denied_is_falsy_singleton(self):
        result = self.compiler.compile(AccessScope(view_unpublished=True), self.owner_fields, 7)
        self.assertIs(result, DENIED)
        self.assertFalse(result)

    def test_owner_branch_ors_one_term_per_field(self):
        """N owner fields produce exactly N OR'd equality terms."""
        for count in range(1, 6):
            fields = tuple(f"owner_{i}" for i in range(count))
            with self.subTest(count=count):
                result = self.compiler.compile(AccessScope(view_own=True), fields, 3)
                self.assertEqual(result.logic, Logic.OR)
                self.assertEqual(len(result.children), count)
                self.assertEqual(
                    [(c.field, c.operator, c.value) for c in result.children],
                    [(field, Operator.EQ, 3) for field in fields],
                )

    def test_view_own_with_unpublished_ignores_publication(self):
        result = self.compiler.compile(AccessScope(view_unpublished=True, view_own=True), ("a", "b"), 1)
        self.assertEqual(result, owned_by(1, "a", "b"))
        self.assertNotIn(PUBLISHED, list(iter_conditions(result)))

    def test_owner_restriction_without_owner_fields_is_misconfiguration(self):
        with self.assertRaises(ImproperlyConfigured):
            self.compiler.compile(AccessScope(view_own=True), (), 1)

    def test_unrestricted_scopes_do_not_need_owner_fields(self):
        self.assertEqual(self.compiler.compile(AccessScope(view_all=True), (), 1), PUBLISHED)
        self.assertEqual(
            self.compiler.compile(AccessScope(view_all=True, view_unpublished=True, view_own=True), (), 1),
            MATCH_ALL,
        )


class JoinDerivationTests(SimpleTestCase):
    def test_plain_fields_need_no_joins(self):
        self.assertEqual(joins_for_paths(["author_id", "title"]), ())

    def test_each_prefix_becomes_a_join(self):
        self.assertEqual(joins_for_paths(["thread.article.author_id"]), ("thread", "thread.article"))

    def test_shared_prefixes_reuse_one_join(self):
        joins = joins_for_paths(["article.author_id", "article.moderator_id", "article.blog.owner_id"])
        self.assertEqual(joins, ("article", "article.blog"))

    def test_required_joins_walks_the_whole_tree(self):
        predicate = PredicateCompiler().compile(
            AccessScope(view_all=True, view_own=True),
            ("author_id", "article.author_id"),
            5,
        )
        self.assertEqual(required_joins(predicate), ("article",))
        self.assertEqual(required_joins(MATCH_ALL), ())
