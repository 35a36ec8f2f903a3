from django.urls import path

from integrator import views

urlpatterns = [
    path('sync/', views.run_sync, name='run-sync'),
]
