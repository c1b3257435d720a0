"""Scope evaluation against fake and database-backed permission stores."""

from __future__ import annotations

from asgiref.sync import async_to_sync
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase

from access_control.resolver import PermissionResolver
from articles.resources import ARTICLE, COMMENT
from content.descriptors import PermissionKey, ResourceDescriptor
from content.scope import AccessScope, ScopeEvaluator
from tests.utils import FakePermissionResolver, create_role, create_user, fake_resolver_for

K = PermissionKey


class PermissionKeyTests(SimpleTestCase):
    def test_keys_are_namespaced_by_resource_name(self):
        self.assertEqual(K.VIEW_OWN.namespaced("article"), "article.view_own")
        self.assertEqual(COMMENT.permission_key(K.REMOVE_OWN), "comment.remove_own")

    def test_descriptor_freezes_owner_fields(self):
        descriptor = ResourceDescriptor(name="page", owner_fields=["author_id"])
        self.assertEqual(descriptor.owner_fields, ("author_id",))
        with self.assertRaises(ValueError):
            ResourceDescriptor(name="")


class ScopeEvaluatorTests(SimpleTestCase):
    def test_each_view_permission_is_checked_independently(self):
        resolver = fake_resolver_for(ARTICLE, K.VIEW_OWN, K.VIEW_UNPUBLISHED)
        scope = ScopeEvaluator(resolver).evaluate(object(), ARTICLE)

        self.assertEqual(scope, AccessScope(view_all=False, view_unpublished=True, view_own=True))
        self.assertCountEqual(
            resolver.resolved,
            ["article.view_all", "article.view_unpublished", "article.view_own"],
        )

    def test_missing_permissions_yield_false(self):
        scope = ScopeEvaluator(FakePermissionResolver()).evaluate(object(), ARTICLE)
        self.assertEqual(scope, AccessScope())

    def test_permission_granted_to_other_role_is_ignored(self):
        resolver = FakePermissionResolver({"article.view_all": {2}}, role_ids=(1,))
        self.assertFalse(ScopeEvaluator(resolver).evaluate(object(), ARTICLE).view_all)

    def test_other_resources_do_not_leak(self):
        resolver = fake_resolver_for(COMMENT, K.VIEW_ALL)
        self.assertEqual(ScopeEvaluator(resolver).evaluate(object(), ARTICLE), AccessScope())

    def test_async_evaluation_matches_sync(self):
        resolver = fake_resolver_for(ARTICLE, K.VIEW_ALL, K.VIEW_OWN)
        evaluator = ScopeEvaluator(resolver)
        scope = async_to_sync(evaluator.aevaluate)(object(), ARTICLE)
        self.assertEqual(scope, evaluator.evaluate(object(), ARTICLE))
        self.assertEqual(scope, AccessScope(view_all=True, view_own=True))


class PermissionResolverTests(TestCase):
    """Database-backed resolution of role sets and grants."""

    @classmethod
    def setUpTestData(cls):
        cls.writer = create_role("Writer", ARTICLE, K.VIEW_OWN, K.ADD)
        cls.reader = create_role("Reader", ARTICLE, K.VIEW_ALL)
        cls.guest = create_role("Guest", ARTICLE, K.VIEW_ALL, K.ADD)
        cls.user = create_user("writer@test.com", cls.writer, cls.reader)

    def setUp(self):
        self.resolver = PermissionResolver()

    def test_authenticated_user_carries_linked_roles(self):
        self.assertEqual(self.resolver.role_ids_for(self.user), {self.writer.pk, self.reader.pk})

    def test_anonymous_user_carries_configured_role(self):
        self.assertEqual(self.resolver.role_ids_for(AnonymousUser()), {self.guest.pk})
        with self.settings(CONTENT_ANONYMOUS_ROLE="Nobody"):
            self.assertEqual(self.resolver.role_ids_for(AnonymousUser()), frozenset())

    def test_unknown_key_resolves_to_none_and_is_not_granted(self):
        permission = self.resolver.resolve("article.nonexistent")
        self.assertIsNone(permission)
        self.assertFalse(self.resolver.is_granted_for_roles(permission, {self.writer.pk}))

    def test_grant_requires_role_intersection(self):
        permission = self.resolver.resolve("article.view_own")
        self.assertTrue(self.resolver.is_granted_for_roles(permission, {self.writer.pk}))
        self.assertFalse(self.resolver.is_granted_for_roles(permission, {self.reader.pk}))
        self.assertFalse(self.resolver.is_granted_for_roles(permission, set()))

    def test_scope_for_user_with_two_roles(self):
        scope = ScopeEvaluator(self.resolver).evaluate(self.user, ARTICLE)
        self.assertEqual(scope, AccessScope(view_all=True, view_unpublished=False, view_own=True))

    def test_scope_for_anonymous_user(self):
        scope = ScopeEvaluator(self.resolver).evaluate(AnonymousUser(), ARTICLE)
        self.assertEqual(scope, AccessScope(view_all=True))
