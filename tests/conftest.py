from types import SimpleNamespace

import pytest

from field_restrictions import StaticPrincipal
from field_restrictions.testing import override_restriction_settings
from test_app.models import Article, Image, Publication, Tag


@pytest.fixture
def bad_guy():
    return StaticPrincipal("BadGuy")


@pytest.fixture
def nice_guy():
    return StaticPrincipal("NiceGuy")


@pytest.fixture
def nobody():
    return StaticPrincipal()


@pytest.fixture
def fail_fast():
    with override_restriction_settings(
        enforcement_settings={"enforcement_mode": "fail_fast"}
    ):
        yield


@pytest.fixture
def library(db):
    publication = Publication.objects.create(title="New York Times", subdomain="nyt")
    article = Article.objects.create(title="all about degas", publication=publication)
    other_article = Article.objects.create(
        title="impressionism", publication=publication
    )
    picasso = Image.objects.create(
        title="picasso", article=article, size=10, format="jpeg", mime_type="image/jpeg"
    )
    monet = Image.objects.create(
        title="monet", article=article, size=20, format="png", mime_type="image/png"
    )
    loose = Image.objects.create(title="loose", size=5)
    tag = Tag.objects.create(name="modern")
    return SimpleNamespace(
        publication=publication,
        article=article,
        other_article=other_article,
        picasso=picasso,
        monet=monet,
        loose=loose,
        tag=tag,
    )
