from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class LicenseStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    REVOKED = 'REVOKED', 'Revoked'


class License(models.Model):
    """License key issued to a customer for an approved order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(max_length=64, unique=True, db_index=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='licenses'
    )
    package = models.ForeignKey(
        'packages.Package',
        on_delete=models.PROTECT,
        related_name='licenses'
    )

    max_devices = models.PositiveSmallIntegerField(default=1)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()

    status = models.CharField(
        max_length=10,
        choices=LicenseStatus.choices,
        default=LicenseStatus.ACTIVE,
        db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'licenses'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status']),
        ]

    def __str__(self):
        return self.license_key

    @property
    def is_valid(self):
        return self.status == LicenseStatus.ACTIVE and self.end_date > timezone.now()
