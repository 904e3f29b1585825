import logging

from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.generic import ListView, CreateView, UpdateView, TemplateView
from django.contrib.auth import logout
from django.contrib.auth import views as auth_views
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.contrib import messages

from .models import User
from .forms import LoginForm, UserCreateForm, UserUpdateForm

logger = logging.getLogger('stockroom.accounts')

SESSION_USER_TYPE_KEY = 'user_type'


def client_ip(request):
    return request.META.get('HTTP_X_FORWARDED_FOR', '').split(',')[0].strip() or \
        request.META.get('REMOTE_ADDR')


class RoleRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """
    Restrict a view to users holding one of ``allowed_roles``.

    Anonymous users are sent to the login page; authenticated users
    without the role get a 403.
    """

    allowed_roles = ()

    def test_func(self):
        user = self.request.user
        return user.is_authenticated and user.has_role(*self.allowed_roles)


class SuperAdminRequiredMixin(RoleRequiredMixin):
    allowed_roles = (User.Role.SUPER_ADMIN,)


class EntryRequiredMixin(RoleRequiredMixin):
    """Device registration is open to admins and super admins."""

    allowed_roles = (User.Role.SUPER_ADMIN, User.Role.ADMIN)


class LoginView(auth_views.LoginView):
    """
    Login view.

    On success the user's role is stored in the session next to the
    user id, so templates and views can branch on ``user_type``.
    """

    template_name = 'accounts/login.html'
    authentication_form = LoginForm
    redirect_authenticated_user = True

    def form_valid(self, form):
        response = super().form_valid(form)
        user = self.request.user
        self.request.session[SESSION_USER_TYPE_KEY] = user.role
        logger.info("User logged in: %s (%s) from %s", user.username, user.role, client_ip(self.request))
        return response

    def form_invalid(self, form):
        response = super().form_invalid(form)
        logger.warning(
            "Failed login attempt for: %s from %s",
            form.data.get('username', 'unknown'), client_ip(self.request)
        )
        return response


class LogoutView(TemplateView):
    """
    GET shows a confirmation page, POST performs the logout.
    """

    template_name = 'accounts/logout_confirm.html'

    def get(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect('accounts:login')
        return super().get(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            logger.info("User logged out: %s", request.user.username)
        logout(request)
        return redirect('accounts:login')


class UserListView(SuperAdminRequiredMixin, ListView):
    """List all users (super admin only)."""

    model = User
    template_name = 'accounts/user_list.html'
    context_object_name = 'users'
    paginate_by = 25


class UserCreateView(SuperAdminRequiredMixin, CreateView):
    """Create new user (super admin only)."""

    model = User
    form_class = UserCreateForm
    template_name = 'accounts/user_form.html'
    success_url = reverse_lazy('accounts:user_list')

    def form_valid(self, form):
        response = super().form_valid(form)
        logger.info("User %s created by %s", self.object.username, self.request.user.username)
        messages.success(self.request, f'用户 "{self.object.username}" 已创建')
        return response


class UserUpdateView(SuperAdminRequiredMixin, UpdateView):
    """Update user role or deactivate (super admin only)."""

    model = User
    form_class = UserUpdateForm
    template_name = 'accounts/user_form.html'
    success_url = reverse_lazy('accounts:user_list')
    context_object_name = 'user_obj'

    def form_valid(self, form):
        if form.instance.pk == self.request.user.pk and not form.cleaned_data['is_active']:
            form.add_error('is_active', '不能停用自己的账号')
            return self.form_invalid(form)
        messages.success(self.request, f'用户 "{form.instance.username}" 已更新')
        return super().form_valid(form)
