"""
Object storage for post images and avatars.

Uploads go to S3 through aioboto3. Results are returned as ``{data, error}``
pairs so callers can decide whether a failed upload is fatal.
"""
import io
import os
import uuid
import aioboto3
from botocore.config import Config
from PIL import Image
import logging

logger = logging.getLogger(__name__)

# Support both AWS_S3_BUCKET (preferred) and legacy AWS_S3_BUCKET_NAME
S3_BUCKET = os.getenv('AWS_S3_BUCKET') or os.getenv('AWS_S3_BUCKET_NAME')
S3_REGION = os.getenv('AWS_S3_REGION') or os.getenv('AWS_REGION', 'us-east-1')
S3_PUBLIC_BASE_URL = os.getenv('S3_PUBLIC_BASE_URL')

THUMBNAIL_SIZE = (320, 320)

def _client():
    session = aioboto3.Session()
    return session.client('s3', region_name=S3_REGION,
                          aws_secret_access_key=os.getenv('AWS_SECRET_ACCESS_KEY'),
                          aws_access_key_id=os.getenv('AWS_ACCESS_KEY_ID'),
                          config=Config(signature_version='s3v4'))

def generate_unique_filename(filename: str) -> str:
    """Random identifier suffixed with the original extension"""
    return f'{uuid.uuid4()}{os.path.splitext(filename)[1]}'

async def upload_image(bucket: str, location: str, content: bytes, content_type: str = 'application/octet-stream'):
    try:
        async with _client() as client:
            await client.put_object(Bucket=bucket, Key=location, Body=content, ContentType=content_type)
        return {'data': {'path': location}, 'error': None}
    except Exception as e:
        logger.error(f"Upload failed for {bucket}/{location}: {e}")
        return {'data': None, 'error': str(e)}

async def delete_image(bucket: str, folder: str, sub_folder: str, file_name: str, extension: str):
    location = f'{folder}/{sub_folder}/{file_name}.{extension}'
    try:
        async with _client() as client:
            res = await client.delete_objects(Bucket=bucket, Delete={'Objects': [{'Key': location}]})
        return {'data': res.get('Deleted', []), 'error': None}
    except Exception as e:
        logger.error(f"Delete failed for {bucket}/{location}: {e}")
        return {'data': None, 'error': str(e)}

def get_image_url(bucket: str, location: str) -> str:
    if S3_PUBLIC_BASE_URL:
        return f"{S3_PUBLIC_BASE_URL.rstrip('/')}/{bucket}/{location}"
    return f"https://{bucket}.s3.{S3_REGION}.amazonaws.com/{location}"

def make_thumbnail(content: bytes):
    """Return JPEG thumbnail bytes and the original ``"<width>/<height>"`` aspect ratio"""
    with Image.open(io.BytesIO(content)) as img:
        aspect_ratio = f'{img.width}/{img.height}'
        if img.mode != 'RGB':
            img = img.convert('RGB')
        img.thumbnail(THUMBNAIL_SIZE, Image.Resampling.LANCZOS)
        output = io.BytesIO()
        img.save(output, format='JPEG', quality=85, optimize=True)
        return output.getvalue(), aspect_ratio
