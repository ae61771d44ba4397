"""
Cleanup Task

Celery beat task for periodic cleanup of stale share link records.
Thin wrapper that delegates to application services.
"""

import logging

from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="tasks.cleanup_expired_share_links")
def cleanup_expired_share_links(self):
    """
    Periodic cleanup of revoked and long-expired share links.

    Expiry is enforced when a link is read, so this task only reclaims
    storage. It accesses ShareLinkService through the DependencyContainer
    and never raises; errors are reported in the returned stats.

    Returns:
        dict: ``share_links_purged``, ``index_entries_pruned`` and ``errors``
    """
    logger.info("Starting share link cleanup task")

    try:
        from celery_app import flask_app
        from cloudpix.application.share_link_service import ShareLinkService
        from cloudpix.config.share_config import ShareLinkConfig

        share_service = flask_app.container.resolve(ShareLinkService)
        grace_seconds = ShareLinkConfig().retention_grace_seconds

        stats = share_service.cleanup_stale_links(grace_seconds=grace_seconds)

        logger.info(
            f"Cleanup completed - Purged: {stats['share_links_purged']}, "
            f"Index entries pruned: {stats['index_entries_pruned']}, "
            f"Errors: {len(stats['errors'])}"
        )
        if stats["errors"]:
            logger.warning(f"Cleanup errors: {stats['errors']}")

        return stats

    except Exception as e:
        error_msg = f"Cleanup task failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {
            "share_links_purged": 0,
            "index_entries_pruned": 0,
            "errors": [error_msg],
        }
