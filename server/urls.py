"""
Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.

It is also a good practice to keep a single URL to the root index page.
"""

from django.urls import include, path

urlpatterns = [
    path('', include('server.apps.images.urls', namespace='images')),
]

handler400 = 'server.apps.images.views.bad_request'
handler404 = 'server.apps.images.views.not_found'
handler500 = 'server.apps.images.views.server_error'
