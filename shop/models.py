from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class Preference(models.Model):
    """A persisted preference value, keyed by ``<prefix>/<name>``."""

    key = models.CharField(max_length=255, unique=True)
    # Decimals are stored as strings; readers coerce them back
    value = models.JSONField(encoder=DjangoJSONEncoder, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shop_preference"
        ordering = ["key"]

    def __str__(self):
        return f"{self.key} = {self.value!r}"

    @property
    def name(self):
        """Preference name without its store prefix."""
        return self.key.rsplit("/", 1)[-1]
