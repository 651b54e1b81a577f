"""
Document model backing the Django document store adapter.
"""
from django.db import models


class Document(models.Model):
    """
    A JSON document addressed by (collection, key).

    Licenses, the ban list, settings, activity entries and HWID reset
    requests are all stored as rows of this table.
    """

    collection = models.CharField(max_length=100)
    key = models.CharField(max_length=255)
    data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "core"
        db_table = "documents"
        ordering = ["collection", "key"]
        constraints = [
            models.UniqueConstraint(
                fields=["collection", "key"], name="unique_document_key"
            ),
        ]
        indexes = [
            models.Index(
                fields=["collection", "created_at"], name="documents_coll_created_idx"
            ),
        ]

    def __str__(self):
        return f"{self.collection}/{self.key}"
