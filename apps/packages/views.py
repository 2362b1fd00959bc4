from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets
from rest_framework.permissions import AllowAny
from drf_spectacular.utils import extend_schema, extend_schema_view
from .exceptions import PackageNotFoundError
from .models import Package
from .serializers import PackageSerializer


@extend_schema_view(
    list=extend_schema(description="List active packages in display order.", tags=['packages']),
    retrieve=extend_schema(description="Get a single active package.", tags=['packages']),
)
class PackageViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public package catalog.

    list: Active packages ordered by sort order
    retrieve: A single active package
    """

    queryset = Package.objects.filter(is_active=True)
    serializer_class = PackageSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['pk'])
        except (Package.DoesNotExist, DjangoValidationError, ValueError):
            raise PackageNotFoundError()
