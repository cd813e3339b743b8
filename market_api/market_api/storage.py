"""
Upload helpers shared by the three storage buckets: avatars/, attachments/
and receipts/.
"""
from rest_framework import serializers


IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp']
DOCUMENT_EXTENSIONS = IMAGE_EXTENSIONS + ['pdf', 'doc', 'docx', 'xls', 'xlsx', 'csv', 'txt', 'zip']


def validate_upload(field_file, max_size, allowed_extensions):
    ext = field_file.name.rsplit('.', 1)[-1].lower() if '.' in field_file.name else ''
    if ext not in allowed_extensions:
        raise serializers.ValidationError(f"Unsupported file extension. Allowed: {', '.join(allowed_extensions)}")

    if field_file.size > max_size:
        raise serializers.ValidationError(f"File size must be {max_size // (1024 * 1024)}MB or smaller.")

    return field_file


def public_url(field_file, request=None):
    """Public URL of a stored file, absolute when a request is available."""
    if not field_file:
        return None
    url = field_file.url
    if request is not None:
        return request.build_absolute_uri(url)
    return url
