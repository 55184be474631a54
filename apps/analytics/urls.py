from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Filter menus
    path('filters/', views.filters, name='filters'),

    # Statistics screen
    path('stats/', views.stats, name='stats'),
    path('distribution/', views.distribution, name='distribution'),

    # Profile counters
    path('summary/', views.summary, name='summary'),
]
