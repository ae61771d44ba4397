"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Subscribes to domain events and logs them appropriately.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from cloudpix.domain.events import (
    AccessRecordingFailedEvent,
    CascadeDeletionFailedEvent,
    DomainEvent,
    FileDeletedEvent,
    FileUploadedEvent,
    ShareLinkAccessedEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
    ShareLinksListedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Link ids are truncated in log lines; the full id is a bearer capability.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, ShareLinkCreatedEvent):
                self._handle_link_created(event)
            elif isinstance(event, ShareLinkAccessedEvent):
                self._handle_link_accessed(event)
            elif isinstance(event, ShareLinkRevokedEvent):
                self._handle_link_revoked(event)
            elif isinstance(event, ShareLinksListedEvent):
                self._handle_links_listed(event)
            elif isinstance(event, AccessRecordingFailedEvent):
                self._handle_access_recording_failed(event)
            elif isinstance(event, FileUploadedEvent):
                self._handle_file_uploaded(event)
            elif isinstance(event, FileDeletedEvent):
                self._handle_file_deleted(event)
            elif isinstance(event, CascadeDeletionFailedEvent):
                self._handle_cascade_failed(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_link_created(self, event: ShareLinkCreatedEvent) -> None:
        expires = event.expires_at.isoformat() if event.expires_at else "never"
        self.logger.info(
            f"Share link created: link={event.aggregate_id[:8]}..., "
            f"file_id={event.file_id}, owner_id={event.owner_id}, expires_at={expires}"
        )

    def _handle_link_accessed(self, event: ShareLinkAccessedEvent) -> None:
        self.logger.info(
            f"Share link accessed: link={event.aggregate_id[:8]}..., "
            f"file_id={event.file_id}, credential_lifetime={event.credential_lifetime}s, "
            f"access_count={event.access_count}"
        )

    def _handle_link_revoked(self, event: ShareLinkRevokedEvent) -> None:
        self.logger.info(
            f"Share link revoked: link={event.aggregate_id[:8]}..., "
            f"file_id={event.file_id}, owner_id={event.owner_id}"
        )

    def _handle_links_listed(self, event: ShareLinksListedEvent) -> None:
        self.logger.debug(
            f"Share links listed: scope={event.scope}, "
            f"id={event.aggregate_id}, count={event.link_count}"
        )

    def _handle_access_recording_failed(self, event: AccessRecordingFailedEvent) -> None:
        self.logger.warning(
            f"Access count not recorded: link={event.aggregate_id[:8]}..., "
            f"error={event.error_message}"
        )

    def _handle_file_uploaded(self, event: FileUploadedEvent) -> None:
        self.logger.info(
            f"File uploaded: file_id={event.aggregate_id}, owner_id={event.owner_id}, "
            f"size={event.file_size} bytes, content_type={event.content_type}"
        )

    def _handle_file_deleted(self, event: FileDeletedEvent) -> None:
        self.logger.info(
            f"File deleted: file_id={event.aggregate_id}, owner_id={event.owner_id}, "
            f"blob_deleted={event.blob_deleted}, "
            f"share_links_removed={event.share_links_removed}"
        )

    def _handle_cascade_failed(self, event: CascadeDeletionFailedEvent) -> None:
        failed = ", ".join(link_id[:8] for link_id in event.failed_link_ids)
        self.logger.error(
            f"Share link cascade incomplete: file_id={event.aggregate_id}, "
            f"failed=[{failed}], errors={list(event.errors)}"
        )
