"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('files', views.FileCollectionView.as_view(), name='file-list'),
    path(
        'files/<str:file_id>',
        views.FileDetailView.as_view(),
        name='file-detail',
    ),
    path(
        'files/<str:file_id>/star',
        views.FileStarView.as_view(),
        name='file-star',
    ),
    path(
        'files/<str:file_id>/trash',
        views.FileTrashView.as_view(),
        name='file-trash',
    ),
    path(
        'files/<str:file_id>/restore',
        views.FileRestoreView.as_view(),
        name='file-restore',
    ),
    path(
        'files/<str:file_id>/access',
        views.FileAccessView.as_view(),
        name='file-access',
    ),
    path(
        'files/<str:file_id>/share',
        views.FileShareView.as_view(),
        name='file-share',
    ),
    path(
        'files/<str:file_id>/shares',
        views.FileSharesView.as_view(),
        name='file-shares',
    ),
    path(
        'files/<str:file_id>/shares/<str:share_id>',
        views.FileShareDetailView.as_view(),
        name='file-share-detail',
    ),
    path('folders', views.FolderCollectionView.as_view(), name='folder-list'),
    path(
        'folders/<str:folder_id>',
        views.FolderDetailView.as_view(),
        name='folder-detail',
    ),
]
