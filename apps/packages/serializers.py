from rest_framework import serializers
from .models import Package


class PackageSerializer(serializers.ModelSerializer):
    """Catalog entry as shown on the landing page and at checkout."""

    durationMonths = serializers.IntegerField(source='duration_months', read_only=True)
    originalPrice = serializers.IntegerField(source='original_price', read_only=True)
    salePrice = serializers.IntegerField(source='sale_price', read_only=True)
    discountPercent = serializers.IntegerField(source='discount_percent', read_only=True)
    videosPerMonth = serializers.IntegerField(source='videos_per_month', read_only=True)
    keywordsTracking = serializers.IntegerField(source='keywords_tracking', read_only=True)
    apiCallsPerMonth = serializers.IntegerField(source='api_calls_per_month', read_only=True)
    maxDevices = serializers.IntegerField(source='max_devices', read_only=True)
    isPopular = serializers.BooleanField(source='is_popular', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    sortOrder = serializers.IntegerField(source='sort_order', read_only=True)

    class Meta:
        model = Package
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'durationMonths',
            'originalPrice',
            'salePrice',
            'discountPercent',
            'features',
            'videosPerMonth',
            'keywordsTracking',
            'apiCallsPerMonth',
            'maxDevices',
            'isPopular',
            'isActive',
            'sortOrder',
        ]
        read_only_fields = fields


class PackageSummarySerializer(serializers.ModelSerializer):
    """Compact package reference embedded in orders."""

    durationMonths = serializers.IntegerField(source='duration_months', read_only=True)

    class Meta:
        model = Package
        fields = ['id', 'name', 'slug', 'durationMonths']
        read_only_fields = fields
