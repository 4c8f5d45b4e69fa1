"""Abstract contract for the object storage gateway."""

from abc import ABC, abstractmethod

from image_pipeline.core.models.result import StorageResult


class ObjectStorageGateway(ABC):
    """Contract for storing, signing and deleting objects in a bucket.

    Implementations could be S3, GCS, local disk, etc.
    Handlers depend on this interface, not the implementation.

    No operation raises to its caller: every failure, including invalid
    input, is reported as a ``ServiceFailure``.
    """

    @abstractmethod
    def upload(
        self,
        *,
        file_data: bytes,
        original_name: str,
        content_type: str | None,
    ) -> StorageResult:
        """Upload an object and return its generated key.

        Args:
            file_data: Binary object content
            original_name: Client-supplied file name, embedded in the key
            content_type: MIME type stored with the object

        Returns:
            ServiceSuccess with the key, or ServiceFailure
        """

    @abstractmethod
    def get_signed_download_url(self, *, key: str) -> StorageResult:
        """Issue a time-limited read URL for ``key``.

        The key is not checked for existence.

        Args:
            key: Object key returned by ``upload``

        Returns:
            ServiceSuccess with the URL, or ServiceFailure
        """

    @abstractmethod
    def delete(self, *, key: str) -> StorageResult:
        """Delete the object stored under ``key``.

        Deleting a missing key succeeds, so the call is idempotent.

        Args:
            key: Object key returned by ``upload``

        Returns:
            ServiceSuccess with a confirmation message, or ServiceFailure
        """
