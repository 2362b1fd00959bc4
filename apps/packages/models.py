from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils.text import slugify
import uuid


class Package(models.Model):
    """Subscription package offered in the catalog."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    duration_months = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    # Prices in VND (no minor unit)
    original_price = models.PositiveIntegerField()
    sale_price = models.PositiveIntegerField()
    discount_percent = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)]
    )

    features = models.JSONField(default=list, blank=True)

    # Plan quotas
    videos_per_month = models.PositiveIntegerField(default=0, help_text='0 = unlimited')
    keywords_tracking = models.PositiveIntegerField(default=0)
    api_calls_per_month = models.PositiveIntegerField(default=0)
    max_devices = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])

    is_popular = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'packages'
        ordering = ['sort_order', 'duration_months']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or str(self.id)
        super().save(*args, **kwargs)

    @property
    def savings(self):
        """Amount saved against the original price."""
        return max(self.original_price - self.sale_price, 0)
