"""HTTP endpoints for folders, files, trash and shares."""

from typing import Any

from django.http import HttpRequest, HttpResponse

from server.apps.files.exceptions import MissingUploadPartsError
from server.apps.files.forms import (
    FileListQueryForm,
    FileUpdateForm,
    FolderCreateForm,
    FolderQueryForm,
    FolderUpdateForm,
    ShareForm,
    StarForm,
    UploadMetadataForm,
)
from server.apps.files.logic import (
    file_operations,
    folder_operations,
    share_operations,
    trash_operations,
)
from server.apps.files.logic.access import get_share_permission
from server.apps.files.presenters import (
    present_file,
    present_folder,
    present_folder_detail,
    present_listing,
    present_share,
    present_shared_with,
)
from server.common.responses import no_content_response, success_response
from server.common.validation import (
    parse_json_body,
    parse_json_field,
    parse_resource_id,
    to_snake_case,
    validate_form,
)
from server.common.views import ApiView


def _json_payload(request: HttpRequest) -> dict[str, Any]:
    return to_snake_case(parse_json_body(request))


def _query_payload(request: HttpRequest) -> dict[str, Any]:
    return to_snake_case(request.GET.dict())


class FileCollectionView(ApiView):
    """``/files``: listings and uploads."""

    def get(self, request: HttpRequest) -> HttpResponse:
        """List files by ``type`` (default, recent, starred, trash, shared)."""
        query = validate_form(FileListQueryForm, _query_payload(request))
        user = request.user
        list_type = query['type']

        if list_type == 'shared':
            shares = share_operations.list_shared_with(user)
            return success_response({
                'shares': [present_shared_with(share) for share in shares],
            })

        if list_type == 'recent':
            data = present_listing([], file_operations.list_recent_files(user))
        elif list_type == 'starred':
            data = present_listing(
                [],
                list(file_operations.list_starred_files(user)),
            )
        elif list_type == 'trash':
            data = present_listing(
                [],
                list(trash_operations.list_trash(user)),
            )
        else:
            contents = folder_operations.list_folder_contents(
                user,
                query['folder_id'],
                include_files=query['include_files'],
            )
            data = present_listing(contents.folders, contents.files)
        return success_response(data)

    def post(self, request: HttpRequest) -> HttpResponse:
        """Upload a file from the ``file`` and ``metadata`` parts."""
        content = request.FILES.get('file')
        raw_metadata = request.POST.get('metadata')
        if content is None or not raw_metadata:
            raise MissingUploadPartsError()

        metadata = validate_form(
            UploadMetadataForm,
            to_snake_case(parse_json_field(raw_metadata, 'metadata')),
        )
        file_instance = file_operations.upload_file(
            request.user,
            content,
            name=metadata['name'],
            mime_type=metadata['type'],
            size_bytes=metadata['size'],
            folder_id=metadata['folder_id'],
        )
        return success_response(present_file(file_instance), status=201)


class FileDetailView(ApiView):
    """``/files/{id}``: fetch, rename or move, and permanent delete."""

    def get(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Fetch a file owned by or shared with the caller."""
        file_instance = file_operations.get_file(
            request.user,
            parse_resource_id(file_id),
        )
        permission = get_share_permission(request.user, file_instance)
        return success_response(present_file(file_instance, permission))

    def put(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Rename and/or move an owned file."""
        resource_id = parse_resource_id(file_id)
        data = validate_form(FileUpdateForm, _json_payload(request))

        file_instance = None
        if 'folder_id' in data:
            file_instance = file_operations.move_file(
                request.user,
                resource_id,
                data['folder_id'],
            )
        if 'name' in data:
            file_instance = file_operations.rename_file(
                request.user,
                resource_id,
                data['name'],
            )
        return success_response(present_file(file_instance))

    def delete(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Permanently delete a trashed file and its blob."""
        trash_operations.permanent_delete_file(
            request.user,
            parse_resource_id(file_id),
        )
        return no_content_response()


class FileStarView(ApiView):
    """``/files/{id}/star``."""

    def post(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Set the starred flag."""
        data = validate_form(StarForm, _json_payload(request))
        file_instance = file_operations.set_starred(
            request.user,
            parse_resource_id(file_id),
            starred=data['starred'],
        )
        return success_response(present_file(file_instance))


class FileTrashView(ApiView):
    """``/files/{id}/trash``."""

    def post(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Move the file to trash."""
        file_instance = trash_operations.trash_file(
            request.user,
            parse_resource_id(file_id),
        )
        return success_response(present_file(file_instance))


class FileRestoreView(ApiView):
    """``/files/{id}/restore``."""

    def post(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Bring the file back from trash."""
        file_instance = trash_operations.restore_file(
            request.user,
            parse_resource_id(file_id),
        )
        return success_response(present_file(file_instance))


class FileAccessView(ApiView):
    """``/files/{id}/access``."""

    def post(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Record that the caller opened the file."""
        file_instance = file_operations.record_access(
            request.user,
            parse_resource_id(file_id),
        )
        permission = get_share_permission(request.user, file_instance)
        return success_response(present_file(file_instance, permission))


class FileShareView(ApiView):
    """``/files/{id}/share``."""

    def post(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """Grant or update access for another user."""
        data = validate_form(ShareForm, _json_payload(request))
        share = share_operations.share_file(
            request.user,
            parse_resource_id(file_id),
            email=data['email'],
            permission=data['permission'],
        )
        return success_response(present_share(share))


class FileSharesView(ApiView):
    """``/files/{id}/shares``."""

    def get(self, request: HttpRequest, file_id: str) -> HttpResponse:
        """List grants on an owned file."""
        shares = share_operations.list_file_shares(
            request.user,
            parse_resource_id(file_id),
        )
        return success_response([present_share(share) for share in shares])


class FileShareDetailView(ApiView):
    """``/files/{id}/shares/{shareId}``."""

    def delete(
        self,
        request: HttpRequest,
        file_id: str,
        share_id: str,
    ) -> HttpResponse:
        """Revoke a grant."""
        share_operations.revoke_share(
            request.user,
            parse_resource_id(file_id),
            parse_resource_id(share_id, field='shareId'),
        )
        return no_content_response()


class FolderCollectionView(ApiView):
    """``/folders``: listing and creation."""

    def get(self, request: HttpRequest) -> HttpResponse:
        """List child folders (and optionally files) of ``parentId``."""
        query = validate_form(FolderQueryForm, _query_payload(request))
        contents = folder_operations.list_folder_contents(
            request.user,
            query['parent_id'],
            include_files=query['include_files'],
        )
        return success_response(
            present_listing(contents.folders, contents.files),
        )

    def post(self, request: HttpRequest) -> HttpResponse:
        """Create a folder."""
        data = validate_form(FolderCreateForm, _json_payload(request))
        folder = folder_operations.create_folder(
            request.user,
            data['name'],
            data['parent_id'],
        )
        return success_response(present_folder(folder), status=201)


class FolderDetailView(ApiView):
    """``/folders/{id}``: fetch, rename or move, and delete."""

    def get(self, request: HttpRequest, folder_id: str) -> HttpResponse:
        """Fetch a folder with its breadcrumb path and counts."""
        folder = folder_operations.get_folder(
            request.user,
            parse_resource_id(folder_id),
        )
        path = folder_operations.resolve_folder_path(folder)
        return success_response(present_folder_detail(folder, path))

    def put(self, request: HttpRequest, folder_id: str) -> HttpResponse:
        """Rename and/or move an owned folder."""
        resource_id = parse_resource_id(folder_id)
        data = validate_form(FolderUpdateForm, _json_payload(request))
        folder = None
        if 'parent_id' in data:
            folder = folder_operations.move_folder(
                request.user,
                resource_id,
                data['parent_id'],
            )
        if 'name' in data:
            folder = folder_operations.rename_folder(
                request.user,
                resource_id,
                data['name'],
            )
        return success_response(present_folder(folder))

    def delete(self, request: HttpRequest, folder_id: str) -> HttpResponse:
        """Delete an empty folder."""
        folder_operations.delete_folder(
            request.user,
            parse_resource_id(folder_id),
        )
        return no_content_response()
