from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Session
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),
    path('user/', views.get_current_user, name='current-user'),

    # Profile
    path('profile/', views.profile, name='profile'),
    path('profile/avatar/', views.upload_avatar, name='profile-avatar'),
]
