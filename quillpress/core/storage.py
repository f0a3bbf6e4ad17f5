"""
Storage Utility
===============

Shared file upload with cloud (MinIO / any S3-compatible endpoint) / local branching.
"""

import json
import logging
import os
import secrets
import time

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}


class StorageError(Exception):
    """Raised when the object store rejects or fails an operation"""


def is_cloud_storage():
    return current_app.config.get('STORAGE_TYPE', 'cloud') == 'cloud'


def _endpoint_url(host, port):
    scheme = 'https' if current_app.config.get('MINIO_USE_SSL') else 'http'
    return f"{scheme}://{host}:{port}"


def _get_client():
    config = current_app.config
    return boto3.client(
        's3',
        endpoint_url=_endpoint_url(config['MINIO_ENDPOINT'], config['MINIO_PORT']),
        aws_access_key_id=config['MINIO_ACCESS_KEY'],
        aws_secret_access_key=config['MINIO_SECRET_KEY'],
        region_name='us-east-1',
    )


def _public_read_policy(bucket):
    return json.dumps({
        'Version': '2012-10-17',
        'Statement': [{
            'Effect': 'Allow',
            'Principal': {'AWS': ['*']},
            'Action': ['s3:GetObject'],
            'Resource': [f'arn:aws:s3:::{bucket}/*'],
        }],
    })


def ensure_bucket_exists(client, bucket):
    """Create the bucket with a public-read policy if it is missing"""
    try:
        client.head_bucket(Bucket=bucket)
        return False
    except ClientError:
        client.create_bucket(Bucket=bucket)
        client.put_bucket_policy(Bucket=bucket, Policy=_public_read_policy(bucket))
        logger.info(f"Bucket '{bucket}' created with public read policy")
        return True


def generate_filename(original_name):
    """Unique object name keeping the original extension, e.g. 1718000000000-k3j2h1g0f9e8.png"""
    extension = os.path.splitext(original_name or '')[1].lower()
    if not extension:
        raise StorageError('File must have a valid extension')
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}"


def upload_file(file_bytes, original_name, content_type=None):
    """Upload file to object storage or the local static folder.

    Args:
        file_bytes: Raw bytes of the file.
        original_name: Client filename, used for the extension only.
        content_type: MIME type to store with the object.

    Returns:
        Public URL (cloud) or local path like "/static/uploads/abc.jpg" (local).
    """
    filename = generate_filename(original_name)
    if content_type is None:
        content_type = CONTENT_TYPES.get(filename.rsplit('.', 1)[-1], 'application/octet-stream')

    if is_cloud_storage():
        return _upload_to_bucket(file_bytes, filename, content_type)
    return _save_locally(file_bytes, filename)


def _upload_to_bucket(file_bytes, filename, content_type):
    config = current_app.config
    bucket = config['MINIO_BUCKET']

    try:
        client = _get_client()
        ensure_bucket_exists(client, bucket)
        client.put_object(
            Bucket=bucket,
            Key=filename,
            Body=file_bytes,
            ContentLength=len(file_bytes),
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(str(e)) from e

    base = _endpoint_url(config['MINIO_EXTERNAL_ENDPOINT'], config['MINIO_EXTERNAL_PORT'])
    return f"{base}/{bucket}/{filename}"


def _save_locally(file_bytes, filename):
    """Save to local static folder."""
    upload_dir = os.path.join(current_app.static_folder, 'uploads')
    os.makedirs(upload_dir, exist_ok=True)
    with open(os.path.join(upload_dir, filename), 'wb') as f:
        f.write(file_bytes)
    return f"/static/uploads/{filename}"


def delete_file(file_url):
    """Delete a file by its URL (cloud or local).

    Returns True when something was removed.
    """
    if not file_url:
        return False

    if file_url.startswith('/static/'):
        full_path = os.path.join(current_app.static_folder, file_url[len('/static/'):])
        if os.path.isfile(full_path):
            os.unlink(full_path)
            return True
        return False

    bucket = current_app.config['MINIO_BUCKET']
    key = file_url.rsplit(f"/{bucket}/", 1)[-1]
    try:
        _get_client().delete_object(Bucket=bucket, Key=key)
    except (BotoCoreError, ClientError) as e:
        raise StorageError(str(e)) from e
    return True
