"""
S3 implementation of the profile store using aioboto3.

Each profile is stored as one JSON object at ``<prefix><profile_id>.json``.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import aioboto3
from botocore.exceptions import ClientError, NoCredentialsError
from pydantic import ValidationError

from likeness.core.config import settings
from likeness.core.exceptions import ProfileStoreError
from likeness.core.logging import get_logger
from likeness.domain.entities.profile import ActorProfile
from likeness.domain.interfaces.storage.profile_store import ProfileStore

logger = get_logger(__name__)


class S3ProfileStore(ProfileStore):
    """Profile store backed by an S3 bucket."""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        prefix: Optional[str] = None,
        region_name: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        """Store configuration but do not initialize client yet."""
        self.bucket_name = bucket_name or settings.AWS_S3_BUCKET
        self.prefix = prefix if prefix is not None else settings.PROFILE_STORE_PREFIX
        self.region_name = region_name or settings.AWS_REGION
        self.access_key_id = access_key_id or settings.AWS_ACCESS_KEY_ID
        self.secret_access_key = secret_access_key or settings.AWS_SECRET_ACCESS_KEY
        self._session = session or aioboto3.Session()
        if not self.bucket_name:
            raise ProfileStoreError("AWS_S3_BUCKET must be set to use the cloud profile store")

    def _key(self, profile_id: str) -> str:
        return f"{self.prefix}{profile_id}.json"

    @asynccontextmanager
    async def _get_client(self) -> AsyncGenerator[Any, None]:
        """Async context manager yielding an S3 client."""
        client_args = {'region_name': self.region_name or "us-east-1"}
        if self.access_key_id and self.secret_access_key:
            logger.debug("Using explicit AWS credentials from config for aioboto3")
            client_args['aws_access_key_id'] = self.access_key_id
            client_args['aws_secret_access_key'] = self.secret_access_key

        try:
            async with self._session.client("s3", **client_args) as s3:
                yield s3
        except NoCredentialsError as e:
            logger.error("AWS credentials not found for profile store", error=str(e))
            raise ProfileStoreError("AWS credentials not found or configured correctly.") from e

    async def get(self, profile_id: str) -> Optional[ActorProfile]:
        key = self._key(profile_id)
        try:
            async with self._get_client() as s3:
                response = await s3.get_object(Bucket=self.bucket_name, Key=key)
                body = await response['Body'].read()
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code')
            if error_code in ('NoSuchKey', '404'):
                return None
            logger.error("Failed to read profile from S3", key=key, error=str(e), exc_info=True)
            raise ProfileStoreError(f"Failed to read profile '{profile_id}': {e}") from e

        try:
            return ActorProfile.model_validate_json(body)
        except ValidationError as e:
            logger.error("Stored profile is not valid", key=key, error=str(e))
            raise ProfileStoreError(f"Stored profile '{profile_id}' is corrupt") from e

    async def list(self) -> List[ActorProfile]:
        profile_ids = []
        try:
            async with self._get_client() as s3:
                paginator = s3.get_paginator('list_objects_v2')
                async for page in paginator.paginate(Bucket=self.bucket_name, Prefix=self.prefix):
                    for obj in page.get('Contents', []):
                        key = obj['Key']
                        if key.endswith(".json"):
                            profile_ids.append(key[len(self.prefix):-len(".json")])
        except ClientError as e:
            logger.error("Failed to list profiles in S3", prefix=self.prefix, error=str(e), exc_info=True)
            raise ProfileStoreError(f"Failed to list profiles: {e}") from e

        profiles = []
        for profile_id in profile_ids:
            profile = await self.get(profile_id)
            # Deleted between listing and reading
            if profile is not None:
                profiles.append(profile)
        logger.debug("Listed profiles", count=len(profiles))
        return profiles

    async def put(self, profile: ActorProfile) -> None:
        key = self._key(profile.id)
        try:
            async with self._get_client() as s3:
                await s3.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=profile.model_dump_json().encode("utf-8"),
                    ContentType="application/json",
                )
        except ClientError as e:
            logger.error("Failed to write profile to S3", key=key, error=str(e), exc_info=True)
            raise ProfileStoreError(f"Failed to write profile '{profile.id}': {e}") from e
        logger.debug("Stored profile in S3", key=key, bucket=self.bucket_name)

    async def delete(self, profile_id: str) -> bool:
        if await self.get(profile_id) is None:
            return False
        key = self._key(profile_id)
        try:
            async with self._get_client() as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error("Failed to delete profile from S3", key=key, error=str(e), exc_info=True)
            raise ProfileStoreError(f"Failed to delete profile '{profile_id}': {e}") from e
        return True
