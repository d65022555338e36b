"""
Setting model.
"""
from django.db import models


class Setting(models.Model):
    """
    Runtime setting stored as JSON under a unique key.

    Known keys are parsed by ``core.domain.settings.parse_setting``.
    """

    key = models.CharField(max_length=100, primary_key=True)
    value_json = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "settings"
        ordering = ["key"]

    def __str__(self):
        return self.key
