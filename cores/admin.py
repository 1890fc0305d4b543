from django.contrib import admin

from .models import Organization, OrganizationMembership

class MembershipInline(admin.TabularInline):
    model = OrganizationMembership
    extra = 0

@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'created_at')
    prepopulated_fields = {'slug': ('name',)}
    inlines = [MembershipInline]
