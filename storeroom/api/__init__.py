"""
Storeroom REST API (Django REST framework).

Mount in the host project's urls.py:
    path('api/storeroom/', include('storeroom.api.urls')),
"""
