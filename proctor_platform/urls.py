from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Authentication ---
    path('api/', include('users.urls')),

    # --- Invitations & Enrollments ---
    path('api/', include('enrollments.urls')),

    # --- Exam Taking ---
    path('api/', include('assessments.urls')),
]
