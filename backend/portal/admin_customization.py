from django.contrib import admin

# Admin branding for the campus portal back office.
admin.site.site_title = 'Campus Portal Admin'
admin.site.site_header = 'Campus Portal Administration'
admin.site.index_title = 'Academic Records'
