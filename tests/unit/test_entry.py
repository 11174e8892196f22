"""
Unit tests for the entry-point wrapper and the model mixin.
"""

import pytest

from field_restrictions import (
    BoundQuerySet,
    BoundRecord,
    PermissionDenied,
    RestrictedManager,
    RestrictionRegistry,
    StaticPrincipal,
    UnrestrictedManager,
    for_principal,
)
from test_app.models import Article, Image, Publication, SubArticle, Tag

pytestmark = [pytest.mark.unit, pytest.mark.django_db]

MESSAGE = "is restricted from the current user"


def test_unrestricted_model_gets_pass_through_manager(bad_guy):
    publications = for_principal(Publication, bad_guy)

    assert type(publications) is UnrestrictedManager
    assert publications.model is Publication
    assert type(Publication.for_principal(bad_guy)) is UnrestrictedManager


def test_unrestricted_finders_return_plain_records(library, bad_guy):
    publications = Publication.for_principal(bad_guy)

    found = publications.find_first(title="New York Times")

    assert type(found) is Publication
    assert found == library.publication
    assert publications.find_by_id(library.publication.pk) == library.publication
    assert list(publications.find_by(subdomain="nyt")) == [library.publication]
    assert publications.find_first(title="nothing") is None
    assert publications.find_all().count() == 1


def test_unrestricted_new_and_create(bad_guy):
    publications = Publication.for_principal(bad_guy)

    draft = publications.new(title="Draft")
    created = publications.create(title="Daily")

    assert type(draft) is Publication
    assert draft.pk is None
    assert Publication.objects.get(pk=created.pk).title == "Daily"


def test_restricted_models_get_restricted_manager(bad_guy):
    images = for_principal(Image, bad_guy)

    assert isinstance(images, RestrictedManager)
    assert images.model is Image
    assert images.principal is bad_guy
    assert isinstance(SubArticle.for_principal(bad_guy), RestrictedManager)


def test_private_registry_decides_wrapping(bad_guy):
    images = for_principal(Image, bad_guy, registry=RestrictionRegistry())

    assert type(images) is UnrestrictedManager


def test_new_applies_attributes_through_checks(bad_guy):
    image = for_principal(Image, bad_guy).new(title="draft", size=12)

    assert isinstance(image, BoundRecord)
    assert image.pk is None
    assert image.title == "draft"
    assert image.size is None
    assert image.restricted_changes() == ["size"]


def test_create_saves_when_nothing_was_denied(nice_guy):
    image = for_principal(Image, nice_guy).create(title="fresh", format="gif", size=3)

    assert image.pk is not None
    stored = Image.objects.get(pk=image.pk)
    assert (stored.format, stored.size) == ("gif", 3)


def test_create_with_denied_attribute_is_not_saved(bad_guy):
    image = for_principal(Image, bad_guy).create(title="fresh", mime_type="image/gif")

    assert image.pk is None
    assert Image.objects.count() == 0
    assert image.is_valid() is False
    assert image.errors == {"mime_type": [MESSAGE]}


def test_fail_fast_new_raises(bad_guy, fail_fast):
    with pytest.raises(PermissionDenied) as exc_info:
        for_principal(Image, bad_guy).new(size=12)

    assert exc_info.value.model_label == "test_app.Image"
    assert MESSAGE in str(exc_info.value)


def test_finders_bind_results(library, bad_guy):
    images = for_principal(Image, bad_guy)

    found = images.find_by_id(library.picasso.pk)
    first = images.find_first(title="monet")
    matching = images.find_by(article=library.article)

    assert found.principal is bad_guy
    assert found == library.picasso
    assert first.title == "monet"
    assert isinstance(matching, BoundQuerySet)
    assert sorted(image.title for image in matching) == ["monet", "picasso"]
    assert images.count() == 3
    assert images.exists() is True


def test_find_first_without_match_returns_none(library, bad_guy):
    assert for_principal(Image, bad_guy).find_first(title="nothing") is None


def test_get_without_match_raises_does_not_exist(library, bad_guy):
    with pytest.raises(Image.DoesNotExist):
        for_principal(Image, bad_guy).get(title="nothing")


def test_querysets_chain_and_slice(library, bad_guy):
    images = for_principal(Image, bad_guy)

    ordered = images.order_by("title")
    first_two = ordered[:2]

    assert [image.title for image in first_two] == ["loose", "monet"]
    assert ordered[2].principal is bad_guy
    assert [image.title for image in images.exclude(size__gt=5)] == ["loose"]
    assert images.all().filter(size=20).first().title == "monet"


def test_records_found_through_entry_are_restricted(library, bad_guy):
    image = for_principal(Image, bad_guy).find_by_id(library.picasso.pk)

    image.size = 12
    image.title = "woo"

    assert image.restricted_changes() == ["size"]
    assert Image.objects.get(pk=library.picasso.pk).size == 10
    assert image.is_valid() is False


def test_proxy_subclass_inherits_parent_rules(library, bad_guy):
    article = SubArticle.for_principal(bad_guy).find_by_id(library.article.pk)

    article.images = []

    assert isinstance(article.unwrap(), SubArticle)
    assert article.restricted_changes() == ["images"]


def test_mixin_is_permitted(bad_guy, nice_guy):
    image = Image()

    assert image.is_permitted(nice_guy, ["format", "mime_type"]) is True
    assert image.is_permitted(bad_guy, ["title", "size"], "any") is True
    assert image.is_permitted(bad_guy, ["title", "size"], "all") is False
    assert Article().is_permitted(StaticPrincipal("Editor"), "publication") is True


def test_create_assigns_to_many_relations_after_saving(library):
    curator = StaticPrincipal("NiceGuy", "Curator")

    image = for_principal(Image, curator).create(title="x", tags=[library.tag])

    assert image.pk is not None
    assert list(Image.objects.get(pk=image.pk).tags.all()) == [library.tag]
    assert image.restricted_changes() == []


def test_create_checks_to_many_relations_after_saving(library, nice_guy):
    image = for_principal(Image, nice_guy).create(title="x", tags=[library.tag])

    assert image.pk is not None
    assert Image.objects.get(pk=image.pk).tags.count() == 0
    assert image.restricted_changes() == ["tags"]


def test_create_with_denied_attribute_skips_to_many_relations(library, bad_guy):
    image = for_principal(Image, bad_guy).create(format="gif", tags=[library.tag])

    assert image.pk is None
    assert image.restricted_changes() == ["format"]
    assert library.tag.images.count() == 0


def test_new_rejects_to_many_relations(library, nice_guy):
    with pytest.raises(ValueError, match="Image.tags"):
        for_principal(Image, nice_guy).new(title="x", tags=[library.tag])


def test_unrestricted_create_assigns_to_many_relations(library, bad_guy):
    created = for_principal(Tag, bad_guy).create(name="cubism", images=[library.loose])

    assert type(created) is Tag
    assert list(created.images.all()) == [library.loose]
