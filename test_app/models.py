from django.db import models

from field_restrictions import RestrictedModelMixin, restrict


class Publication(RestrictedModelMixin, models.Model):
    title = models.CharField(max_length=200)
    subdomain = models.CharField(max_length=100, blank=True)
    masthead = models.CharField(max_length=200, blank=True)
    num_authors = models.PositiveIntegerField(default=0)

    class Meta:
        app_label = "test_app"


@restrict("images", from_="BadGuy")
@restrict("publication", to="Editor")
class Article(RestrictedModelMixin, models.Model):
    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=200, blank=True)
    author = models.CharField(max_length=120, blank=True)
    content = models.TextField(blank=True)
    publication = models.ForeignKey(
        Publication,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="articles",
    )

    class Meta:
        app_label = "test_app"


class SubArticle(Article):
    class Meta:
        app_label = "test_app"
        proxy = True


class Tag(models.Model):
    name = models.CharField(max_length=50)

    class Meta:
        app_label = "test_app"


@restrict("size", from_="BadGuy")
@restrict(["format", "mime_type"], to=["Superhero", "NiceGuy"])
@restrict("tags", to="Curator")
class Image(RestrictedModelMixin, models.Model):
    title = models.CharField(max_length=200, blank=True)
    article = models.ForeignKey(
        Article,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="images",
    )
    size = models.IntegerField(null=True, blank=True)
    format = models.CharField(max_length=20, blank=True)
    mime_type = models.CharField(max_length=50, blank=True)
    tags = models.ManyToManyField(Tag, blank=True, related_name="images")

    class Meta:
        app_label = "test_app"


@restrict("size", to="Illustrator")
class Illustration(Image):
    class Meta:
        app_label = "test_app"
        proxy = True
