import logging
import re
from functools import lru_cache
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from entrevisto.config import settings
from entrevisto.core.security import generate_id

logger = logging.getLogger(__name__)


class BlobStorageError(RuntimeError):
    pass


@lru_cache(maxsize=1)
def _s3_client():
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        config=Config(connect_timeout=10, read_timeout=60, retries={"max_attempts": 3}),
    )


def _object_url(key: str) -> str:
    if settings.resume_public_base_url:
        return f"{settings.resume_public_base_url.rstrip('/')}/{key}"
    return f"https://{settings.resume_bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"


def resume_object_key(user_id: str, filename: str) -> str:
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", Path(filename or "").name).strip("._") or "resume.pdf"
    return f"resumes/{user_id}/{generate_id()}-{safe_name}"


def upload_resume_pdf(user_id: str, filename: str, content: bytes) -> str:
    """Store the PDF and return its URL."""
    key = resume_object_key(user_id, filename)
    try:
        _s3_client().put_object(
            Bucket=settings.resume_bucket,
            Key=key,
            Body=content,
            ContentType="application/pdf",
        )
    except (BotoCoreError, ClientError) as e:
        logger.exception("Resume upload to bucket=%s failed for user=%s: %s", settings.resume_bucket, user_id, e)
        raise BlobStorageError("Failed to store resume file") from e
    logger.info("Resume stored: bucket=%s key=%s bytes=%d", settings.resume_bucket, key, len(content))
    return _object_url(key)
