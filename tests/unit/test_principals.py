"""
Unit tests for principals.
"""

import pytest
from django.contrib.auth.models import AnonymousUser, Group, User

from field_restrictions import StaticPrincipal, UserPrincipal, is_permitted
from test_app.models import Article, Image

pytestmark = pytest.mark.unit


@pytest.mark.django_db
def test_user_principal_uses_group_names_as_roles():
    user = User.objects.create_user(username="nice", password="pass12345")
    user.groups.add(Group.objects.create(name="NiceGuy"))

    principal = UserPrincipal(user)

    assert principal.roles_for(Image()) == frozenset({"NiceGuy"})
    assert is_permitted(principal, Image(), "format") is True


@pytest.mark.django_db
def test_user_principal_resolvers_add_record_roles():
    user = User.objects.create_user(username="author", password="pass12345")

    def _author_role(user, record):
        if isinstance(record, Article) and record.author == user.username:
            return "Editor"
        return ()

    principal = UserPrincipal(user, resolvers=[_author_role])

    assert principal.roles_for(Article(author="author")) == frozenset({"Editor"})
    assert principal.roles_for(Article(author="someone")) == frozenset()
    assert is_permitted(principal, Article(author="author"), "publication") is True


@pytest.mark.django_db
def test_user_principal_caches_groups_until_invalidated():
    user = User.objects.create_user(username="cached", password="pass12345")
    principal = UserPrincipal(user)
    assert principal.global_roles() == frozenset()

    user.groups.add(Group.objects.create(name="Superhero"))
    assert principal.global_roles() == frozenset()

    principal.invalidate()
    assert principal.global_roles() == frozenset({"Superhero"})


def test_anonymous_and_missing_users_hold_no_role():
    def _always(user, record):
        return ["Superhero"]

    assert UserPrincipal(AnonymousUser(), resolvers=[_always]).roles_for(Image()) == frozenset()
    assert UserPrincipal(None).roles_for(Image()) == frozenset()


@pytest.mark.django_db
def test_user_principals_for_same_user_are_equal():
    user = User.objects.create_user(username="same", password="pass12345")

    assert UserPrincipal(user) == UserPrincipal(user)
    assert hash(UserPrincipal(user)) == hash(UserPrincipal(user))
    assert UserPrincipal(user) != UserPrincipal(user, resolvers=[lambda u, r: ()])


def test_static_principals_compare_by_roles():
    assert StaticPrincipal("BadGuy") == StaticPrincipal("BadGuy")
    assert StaticPrincipal("BadGuy") != StaticPrincipal("NiceGuy")
