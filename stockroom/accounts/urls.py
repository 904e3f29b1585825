from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('login/', views.LoginView.as_view(), name='login'),
    path('logout/', views.LogoutView.as_view(), name='logout'),

    # User management (super admin only)
    path('accounts/users/', views.UserListView.as_view(), name='user_list'),
    path('accounts/users/create/', views.UserCreateView.as_view(), name='user_create'),
    path('accounts/users/<int:pk>/edit/', views.UserUpdateView.as_view(), name='user_edit'),
]
