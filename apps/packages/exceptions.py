from rest_framework.exceptions import APIException


class PackageNotFoundError(APIException):
    """Package does not exist or is no longer sold."""
    status_code = 404
    default_detail = 'Package not found.'
    default_code = 'package_not_found'
