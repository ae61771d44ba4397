"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields

from cloudpix.api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

share_request = api.model(
    "ShareRequest",
    {
        "expiration_days": fields.Integer(
            required=False,
            description="Link lifetime in days (1, 7 or 30); omit or null for never",
            example=7,
        ),
    },
)

rename_request = api.model(
    "RenameRequest",
    {
        "file_name": fields.String(
            required=True,
            description="New display name for the file",
            example="holiday.jpg",
        ),
    },
)

# =============================================================================
# Response Models
# =============================================================================

file_response = api.model(
    "File",
    {
        "file_id": fields.String(description="File identifier"),
        "owner_id": fields.String(description="Owner identifier"),
        "file_name": fields.String(description="Display name"),
        "file_size": fields.Integer(description="Size in bytes"),
        "content_type": fields.String(description="MIME type"),
        "upload_date": fields.String(description="Upload timestamp (ISO 8601)"),
        "status": fields.String(description="File status", enum=["active", "deleted"]),
    },
)

shared_file = api.model(
    "SharedFile",
    {
        "file_id": fields.String(description="File identifier"),
        "file_name": fields.String(description="Display name"),
        "content_type": fields.String(description="MIME type"),
        "file_size": fields.Integer(description="Size in bytes"),
        "upload_date": fields.String(description="Upload timestamp (ISO 8601)"),
    },
)

share_link_response = api.model(
    "ShareLink",
    {
        "link_id": fields.String(description="Share link identifier"),
        "file_id": fields.String(description="Shared file"),
        "owner_id": fields.String(description="Owner who created the link"),
        "created_at": fields.String(description="Creation timestamp (ISO 8601)"),
        "expires_at": fields.String(
            description="Expiration timestamp, null for never", allow_null=True
        ),
        "access_count": fields.Integer(description="Successful resolutions"),
        "is_revoked": fields.Boolean(description="Whether the owner revoked the link"),
        "status": fields.String(
            description="Link status", enum=["active", "expired", "revoked"]
        ),
        "is_active": fields.Boolean(description="Whether the link currently grants access"),
        "share_url": fields.String(description="Public URL to hand out"),
    },
)

owner_share_link_response = api.inherit(
    "OwnerShareLink",
    share_link_response,
    {
        "file": fields.Nested(
            shared_file, allow_null=True, description="File summary, null if deleted"
        ),
    },
)

access_credential = api.model(
    "AccessCredential",
    {
        "url": fields.String(description="Signed, read-only download URL"),
        "expires_at": fields.String(description="Credential expiry (ISO 8601)"),
        "expires_in": fields.Integer(description="Credential lifetime in seconds"),
    },
)

resolved_share_link = api.model(
    "ResolvedShareLink",
    {
        "link_id": fields.String(description="Share link identifier"),
        "created_at": fields.String(description="Creation timestamp (ISO 8601)"),
        "expires_at": fields.String(
            description="Expiration timestamp, null for never", allow_null=True
        ),
        "share_url": fields.String(description="Public URL of this link"),
    },
)

resolve_response = api.model(
    "ResolveResponse",
    {
        "share_link": fields.Nested(resolved_share_link),
        "file": fields.Nested(shared_file),
        "download": fields.Nested(access_credential),
    },
)

delete_response = api.model(
    "DeleteFileResponse",
    {
        "file_id": fields.String(description="Deleted file"),
        "deleted": fields.Boolean(description="Record removed"),
        "blob_deleted": fields.Boolean(description="Stored bytes removed"),
        "share_links_removed": fields.Integer(description="Share links retired"),
        "share_links_failed": fields.List(
            fields.String, description="Share links that could not be deleted"
        ),
        "complete": fields.Boolean(description="True when every share link was removed"),
    },
)

error_response = api.model(
    "Error",
    {
        "error": fields.String(description="Error code"),
        "title": fields.String(description="Error title"),
        "message": fields.String(description="User-friendly error message"),
        "action": fields.String(description="Suggested action"),
        "retryable": fields.Boolean(description="Present and true when retrying may help"),
    },
)

file_list_response = api.model(
    "FileList",
    {"files": fields.List(fields.Nested(file_response))},
)

share_link_list_response = api.model(
    "ShareLinkList",
    {"share_links": fields.List(fields.Nested(share_link_response))},
)

owner_share_link_list_response = api.model(
    "OwnerShareLinkList",
    {"share_links": fields.List(fields.Nested(owner_share_link_response))},
)
