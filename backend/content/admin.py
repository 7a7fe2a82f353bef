from django.contrib import admin

from .models import Notice, NoticeView, Resource


@admin.register(Notice)
class NoticeAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'category', 'priority', 'is_important', 'is_draft', 'is_active', 'publish_date', 'view_count')
    list_filter = ('category', 'priority', 'is_important', 'is_draft', 'is_active', 'all_students')
    search_fields = ('title', 'content')
    raw_id_fields = ('owner', 'created_by')
    readonly_fields = ('view_count',)


@admin.register(NoticeView)
class NoticeViewAdmin(admin.ModelAdmin):
    list_display = ('notice', 'user', 'viewed_at')
    raw_id_fields = ('notice', 'user')


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ('title', 'owner', 'subject', 'resource_type', 'is_public', 'is_active', 'download_count', 'uploaded_at')
    list_filter = ('resource_type', 'is_public', 'is_active', 'semester')
    search_fields = ('title', 'subject', 'subject_code', 'original_name')
    raw_id_fields = ('owner', 'created_by')
    readonly_fields = ('original_name', 'file_size', 'mime_type', 'download_count')
