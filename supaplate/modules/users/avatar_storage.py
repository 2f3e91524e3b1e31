import boto3
from botocore.exceptions import ClientError
from fastapi import HTTPException
from supabase import Client, StorageException
from typing import Optional
import logging

from supaplate.config import settings

logger = logging.getLogger(__name__)

MAX_AVATAR_BYTES = 1024 * 1024


def is_acceptable_avatar(size: int, content_type: Optional[str]) -> bool:
    """Only non-empty images under 1 MiB replace the current avatar."""
    return 0 < size < MAX_AVATAR_BYTES and bool(content_type) and content_type.startswith("image/")


class SupabaseAvatarStorage:
    def __init__(self, supabase: Client):
        self.bucket = supabase.storage.from_(settings.avatar_bucket)

    def upload(self, user_id: str, content: bytes, content_type: str) -> str:
        """Upsert the user's avatar and return its public URL"""
        try:
            self.bucket.upload(
                user_id,
                content,
                {"content-type": content_type, "upsert": "true"}
            )
        except StorageException as e:
            logger.error(f"Failed to upload avatar for {user_id}: {str(e)}")
            raise HTTPException(status_code=400, detail=getattr(e, "message", None) or str(e))
        return self.bucket.get_public_url(user_id)

    def delete(self, user_id: str) -> bool:
        try:
            self.bucket.remove([user_id])
            return True
        except StorageException as e:
            logger.error(f"Failed to delete avatar for {user_id}: {str(e)}")
            return False


class S3AvatarStorage:
    def __init__(self):
        if not all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.avatar_s3_bucket]):
            raise ValueError("AWS S3 credentials and avatar bucket must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.avatar_s3_bucket

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def upload(self, user_id: str, content: bytes, content_type: str) -> str:
        """Upload avatar to S3 and return the object URL"""
        key = f"avatars/{user_id}"
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type
            )
        except ClientError as e:
            logger.error(f"Failed to upload avatar to S3: {str(e)}")
            raise HTTPException(status_code=400, detail=str(e))
        return self.public_url(key)

    def delete(self, user_id: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=f"avatars/{user_id}")
            return True
        except ClientError as e:
            logger.error(f"Failed to delete avatar from S3: {str(e)}")
            return False


def get_avatar_storage(supabase: Client):
    if settings.avatar_s3_bucket:
        return S3AvatarStorage()
    return SupabaseAvatarStorage(supabase)
