"""
API Namespaces - Organized endpoint groups
"""

import os
from typing import Optional

from flask import current_app, g, request, send_file
from flask_restx import Namespace, Resource

from cloudpix.api.v1.auth import require_auth
from cloudpix.api.v1.models import (
    delete_response,
    error_response,
    file_list_response,
    file_response,
    owner_share_link_list_response,
    rename_request,
    resolve_response,
    share_link_list_response,
    share_link_response,
    share_request,
)
from cloudpix.application.file_service import FileService
from cloudpix.application.share_link_service import ShareLinkService
from cloudpix.domain.errors import (
    DomainError,
    ErrorCategory,
    categorize_domain_error,
    create_error_response,
)
from cloudpix.domain.files.signed_url_service import SignedUrlService
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.infrastructure.local_file_storage_repository import (
    LocalFileStorageRepository,
)


def _error_response(error: Exception, tag: str):
    """
    Map an exception onto a structured error response.

    Domain errors get their category's status code. Anything else is an
    unexpected failure and is logged with its traceback.
    """
    if isinstance(error, DomainError):
        category, status_code = categorize_domain_error(error)
        if status_code >= 500:
            current_app.logger.error(f"[{tag}] {category.value}: {error}")
        else:
            current_app.logger.info(f"[{tag}] {category.value}: {error}")
        return create_error_response(category, str(error), status_code=status_code)

    current_app.logger.exception(f"[{tag}] Unexpected error: {error}")
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR, str(error), status_code=500
    )


def _parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


# =============================================================================
# Files Namespace - Upload and file management
# =============================================================================

files_ns = Namespace("files", description="File upload and management")


@files_ns.route("")
class FileCollection(Resource):
    """List and upload files"""

    @files_ns.doc("list_files", security="bearer")
    @files_ns.response(200, "Success", file_list_response)
    @files_ns.response(401, "Authentication Required", error_response)
    @require_auth
    def get(self):
        """List the caller's files, newest first"""
        try:
            file_service = current_app.container.resolve(FileService)
            return {"files": file_service.list_files(g.user_id)}, 200
        except Exception as e:
            return _error_response(e, "LIST_FILES_V1")

    @files_ns.doc("upload_file", security="bearer")
    @files_ns.response(201, "Uploaded", file_response)
    @files_ns.response(400, "Bad Request", error_response)
    @files_ns.response(413, "File Too Large", error_response)
    @files_ns.response(415, "Unsupported File Type", error_response)
    @require_auth
    def post(self):
        """
        Upload a file

        Send the file as multipart form data in the ``file`` field.
        """
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "Missing 'file' in multipart form data",
                status_code=400,
            )

        try:
            stream = upload.stream
            stream.seek(0, os.SEEK_END)
            size = stream.tell()
            stream.seek(0)

            file_service = current_app.container.resolve(FileService)
            result = file_service.upload_file(
                owner_id=g.user_id,
                file_name=upload.filename,
                content_type=upload.mimetype,
                content=stream,
                size=size,
            )
            current_app.logger.info(
                f"[UPLOAD_FILE_V1] Stored file {result['file_id']} ({size} bytes)"
            )
            return result, 201
        except Exception as e:
            return _error_response(e, "UPLOAD_FILE_V1")


@files_ns.route("/<string:file_id>")
@files_ns.param("file_id", "The file identifier")
class FileItem(Resource):
    """Read, rename and delete a file"""

    @files_ns.doc("get_file", security="bearer")
    @files_ns.response(200, "Success", file_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @require_auth
    def get(self, file_id):
        """Get file metadata"""
        try:
            file_service = current_app.container.resolve(FileService)
            return file_service.get_file(file_id, g.user_id), 200
        except Exception as e:
            return _error_response(e, "GET_FILE_V1")

    @files_ns.doc("rename_file", security="bearer")
    @files_ns.expect(rename_request)
    @files_ns.response(200, "Renamed", file_response)
    @files_ns.response(400, "Bad Request", error_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @require_auth
    def put(self, file_id):
        """Rename a file"""
        data = request.get_json(silent=True) or {}
        new_name = data.get("file_name")
        if not isinstance(new_name, str):
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "Missing 'file_name' in request body",
                status_code=400,
            )

        try:
            file_service = current_app.container.resolve(FileService)
            return file_service.rename_file(file_id, g.user_id, new_name), 200
        except Exception as e:
            return _error_response(e, "RENAME_FILE_V1")

    @files_ns.doc("delete_file", security="bearer")
    @files_ns.response(200, "Deleted", delete_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @require_auth
    def delete(self, file_id):
        """
        Delete a file

        Removes the stored bytes, every share link of the file and the file
        record. Share links that could not be deleted are listed in
        ``share_links_failed``; they stop resolving because the file is gone.
        """
        try:
            file_service = current_app.container.resolve(FileService)
            result = file_service.delete_file(file_id, g.user_id)
            if not result["complete"]:
                current_app.logger.warning(
                    f"[DELETE_FILE_V1] File {file_id} deleted with "
                    f"{len(result['share_links_failed'])} share link(s) left behind"
                )
            return result, 200
        except Exception as e:
            return _error_response(e, "DELETE_FILE_V1")


@files_ns.route("/<string:file_id>/share")
@files_ns.param("file_id", "The file identifier")
class FileShare(Resource):
    """Create share links"""

    @files_ns.doc("create_share_link", security="bearer")
    @files_ns.expect(share_request)
    @files_ns.response(201, "Created", share_link_response)
    @files_ns.response(400, "Invalid Expiration", error_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @files_ns.response(409, "File Not Active", error_response)
    @require_auth
    def post(self, file_id):
        """
        Create a share link for a file

        ``expiration_days`` must be 1, 7 or 30. Omit it, or send null, for a
        link that never expires.
        """
        data = request.get_json(silent=True) or {}

        try:
            share_service = current_app.container.resolve(ShareLinkService)
            result = share_service.create_share_link(
                file_id, g.user_id, data.get("expiration_days")
            )
            return result, 201
        except Exception as e:
            return _error_response(e, "CREATE_SHARE_V1")


@files_ns.route("/<string:file_id>/share-links")
@files_ns.param("file_id", "The file identifier")
class FileShareLinks(Resource):
    """List share links of a file"""

    @files_ns.doc(
        "list_file_share_links",
        security="bearer",
        params={"active_only": "Only return links that currently grant access"},
    )
    @files_ns.response(200, "Success", share_link_list_response)
    @files_ns.response(403, "Forbidden", error_response)
    @files_ns.response(404, "File Not Found", error_response)
    @require_auth
    def get(self, file_id):
        """List every share link of a file, flagged with status"""
        active_only = _parse_bool(request.args.get("active_only"))

        try:
            share_service = current_app.container.resolve(ShareLinkService)
            links = share_service.list_file_share_links(
                file_id, g.user_id, active_only=active_only
            )
            return {"share_links": links}, 200
        except Exception as e:
            return _error_response(e, "LIST_FILE_SHARES_V1")


# =============================================================================
# Share Namespace - Resolution and revocation
# =============================================================================

share_ns = Namespace("share", description="Share link operations")


@share_ns.route("/user")
class UserShareLinks(Resource):
    """Share links created by the caller"""

    @share_ns.doc("list_user_share_links", security="bearer")
    @share_ns.response(200, "Success", owner_share_link_list_response)
    @share_ns.response(401, "Authentication Required", error_response)
    @require_auth
    def get(self):
        """List the caller's share links with a summary of each file"""
        try:
            share_service = current_app.container.resolve(ShareLinkService)
            return {"share_links": share_service.list_owner_share_links(g.user_id)}, 200
        except Exception as e:
            return _error_response(e, "LIST_USER_SHARES_V1")


@share_ns.route("/<string:link_id>")
@share_ns.param("link_id", "The share link identifier")
class ShareLinkResolve(Resource):
    """Anonymous share link access"""

    @share_ns.doc("resolve_share_link")
    @share_ns.response(200, "Success", resolve_response)
    @share_ns.response(404, "Link or File Not Found", error_response)
    @share_ns.response(410, "Link Expired or Revoked", error_response)
    @share_ns.response(502, "Download Unavailable", error_response)
    @share_ns.response(503, "Service Unavailable", error_response)
    def get(self, link_id):
        """
        Resolve a share link

        No authentication. Returns file metadata and a short-lived download
        URL. Expired and revoked links answer 410 with distinct error codes.
        """
        try:
            current_app.logger.debug(f"[SHARE_V1] Resolving link {link_id[:8]}...")
            share_service = current_app.container.resolve(ShareLinkService)
            return share_service.resolve_share_link(link_id), 200
        except Exception as e:
            return _error_response(e, "SHARE_V1")


@share_ns.route("/<string:link_id>/revoke")
@share_ns.param("link_id", "The share link identifier")
class ShareLinkRevoke(Resource):
    """Revoke a share link"""

    @share_ns.doc("revoke_share_link", security="bearer")
    @share_ns.response(200, "Revoked", share_link_response)
    @share_ns.response(403, "Forbidden", error_response)
    @share_ns.response(404, "Link Not Found", error_response)
    @require_auth
    def post(self, link_id):
        """Revoke a share link; revoking twice is harmless"""
        try:
            share_service = current_app.container.resolve(ShareLinkService)
            return share_service.revoke_share_link(link_id, g.user_id), 200
        except Exception as e:
            return _error_response(e, "REVOKE_SHARE_V1")


# =============================================================================
# Storage Namespace - Signed downloads for the local backend
# =============================================================================

storage_ns = Namespace("storage", description="Signed object downloads")


@storage_ns.route("/<path:key>")
@storage_ns.param("key", "The object key")
class StorageObject(Resource):
    """Serve an object from local storage"""

    @storage_ns.doc(
        "download_object",
        params={
            "expires": "Expiry as a Unix timestamp",
            "signature": "HMAC signature of key and expiry",
        },
    )
    @storage_ns.response(200, "File content")
    @storage_ns.response(403, "Invalid or Expired Signature", error_response)
    @storage_ns.response(404, "Not Found", error_response)
    def get(self, key):
        """
        Download an object with a signed URL

        URLs are minted when a share link is resolved. Only available when
        the local storage backend is configured.
        """
        storage = current_app.container.resolve(IObjectStorageRepository)
        if not isinstance(storage, LocalFileStorageRepository):
            return create_error_response(
                ErrorCategory.NOT_FOUND,
                "Signed downloads are served by the storage provider",
                status_code=404,
            )

        signature = request.args.get("signature")
        try:
            expires = int(request.args.get("expires", ""))
        except ValueError:
            expires = None

        signed_url_service = current_app.container.resolve(SignedUrlService)
        if not signed_url_service.validate(key, signature, expires):
            current_app.logger.warning(
                f"[STORAGE_V1] Rejected download for key {key}: bad or expired signature"
            )
            return create_error_response(
                ErrorCategory.INVALID_SIGNATURE,
                "Invalid or expired signature",
                status_code=403,
            )

        path = storage.resolve_path(key)
        if path is None or not path.is_file():
            return create_error_response(
                ErrorCategory.FILE_NOT_FOUND,
                f"Object not found: {key}",
                status_code=404,
            )

        current_app.logger.info(f"[STORAGE_V1] Serving object {key}")
        return send_file(path, download_name=path.name)
