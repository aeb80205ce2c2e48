# app/models/media.py
from tortoise import fields, models

class MediaObject(models.Model):
    """Uploaded attachment bytes, used when MEDIA_BACKEND=database."""
    id = fields.IntField(pk=True)
    filename = fields.CharField(max_length=255, unique=True, index=True)
    content_type = fields.CharField(max_length=255, null=True)
    data = fields.BinaryField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "media_objects"
