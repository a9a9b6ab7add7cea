from django.urls import path

from server.apps.images import views

app_name = 'images'

urlpatterns = [
    path('', views.index, name='index'),
    path('health', views.health, name='health'),
    path('upload', views.upload, name='upload'),
    path('image', views.delete_image, name='delete'),
]
