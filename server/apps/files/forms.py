"""Validation forms for folder and file payloads.

Forms receive snake_case keys (see ``to_snake_case``); the optional
parent/folder id of an update is a move only when the key is present,
so ``{"parentId": null}`` moves to root while omitting it does not.
"""

from typing import Any, Final

from django import forms

from server.apps.accounts.forms import EmailField
from server.apps.files.models import SharePermission

_NAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255

LIST_TYPES: Final = ('default', 'recent', 'starred', 'trash', 'shared')


class _NameField(forms.CharField):
    """Trimmed display name of a folder or file."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault('min_length', 1)
        kwargs.setdefault('max_length', _NAME_MAX_LENGTH)
        super().__init__(**kwargs)


class _UpdateForm(forms.Form):
    """Rename and/or move payload."""

    location_field: str

    def clean(self) -> dict[str, Any]:
        """Require at least a new name or a new location."""
        cleaned_data = super().clean()
        if not cleaned_data.get('name'):
            cleaned_data.pop('name', None)
        if self.location_field not in self.data:
            cleaned_data.pop(self.location_field, None)
        if 'name' not in cleaned_data and (
            self.location_field not in cleaned_data
        ):
            raise forms.ValidationError(
                'Provide a new name or a new location.',
            )
        return cleaned_data


class FolderCreateForm(forms.Form):
    """Payload of ``POST /folders``."""

    name = _NameField()
    parent_id = forms.UUIDField(required=False)


class FolderUpdateForm(_UpdateForm):
    """Payload of ``PUT /folders/{id}``."""

    location_field = 'parent_id'

    name = _NameField(required=False)
    parent_id = forms.UUIDField(required=False)


class FolderQueryForm(forms.Form):
    """Query string of ``GET /folders``."""

    parent_id = forms.UUIDField(required=False)
    include_files = forms.BooleanField(required=False)


class FileListQueryForm(forms.Form):
    """Query string of ``GET /files``."""

    folder_id = forms.UUIDField(required=False)
    include_files = forms.BooleanField(required=False)
    type = forms.ChoiceField(  # noqa: WPS125
        choices=[(list_type, list_type) for list_type in LIST_TYPES],
        required=False,
    )

    def clean_type(self) -> str:
        """Default to the folder listing."""
        return self.cleaned_data.get('type') or 'default'


class FileUpdateForm(_UpdateForm):
    """Payload of ``PUT /files/{id}``."""

    location_field = 'folder_id'

    name = _NameField(required=False)
    folder_id = forms.UUIDField(required=False)


class UploadMetadataForm(forms.Form):
    """JSON ``metadata`` part of ``POST /files``."""

    name = _NameField()
    type = forms.CharField(  # noqa: WPS125
        min_length=1,
        max_length=_MIME_TYPE_MAX_LENGTH,
    )
    size = forms.IntegerField(min_value=1)
    folder_id = forms.UUIDField(required=False)


class StarForm(forms.Form):
    """Payload of ``POST /files/{id}/star``."""

    starred = forms.BooleanField(required=False)

    def clean(self) -> dict[str, Any]:
        """Require the flag to be present."""
        cleaned_data = super().clean()
        if 'starred' not in self.data:
            self.add_error('starred', 'This field is required.')
        return cleaned_data


class ShareForm(forms.Form):
    """Payload of ``POST /files/{id}/share``."""

    email = EmailField()
    permission = forms.ChoiceField(
        choices=SharePermission.choices,
        required=False,
    )

    def clean_permission(self) -> str:
        """Default to read-only access."""
        return self.cleaned_data.get('permission') or SharePermission.VIEW
