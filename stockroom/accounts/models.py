"""
Custom User model and roles for Stockroom
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Custom user manager for Stockroom users."""

    def create_user(self, username, password=None, **extra_fields):
        """Create and return a regular user."""
        if not username:
            raise ValueError('The Username field must be set')
        username = username.strip().lower()  # Normalize username
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        """Create and return a superuser."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.Role.SUPER_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(username, password, **extra_fields)


class User(AbstractUser):
    """
    Inventory staff member.

    The role decides which dashboard pages the user may open:
    super admins manage devices, tags and users; admins may also
    register devices; plain users can only browse and search.
    """

    class Role(models.TextChoices):
        SUPER_ADMIN = 'super_admin', '超级管理员'
        ADMIN = 'admin', '管理员'
        USER = 'user', '普通用户'

    username = models.CharField('用户名', max_length=150, unique=True)

    role = models.CharField(
        '角色',
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        help_text='User role determines access level'
    )

    full_name = models.CharField('姓名', max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['username']

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        """Return full name or username."""
        return self.full_name or self.username

    @property
    def is_super_admin(self):
        return self.role == self.Role.SUPER_ADMIN or self.is_superuser

    @property
    def is_admin(self):
        """Admins and super admins."""
        return self.is_super_admin or self.role == self.Role.ADMIN

    def has_role(self, *roles):
        """Check the user's role against ``roles``; superusers always pass."""
        return self.is_superuser or self.role in roles

    def can_enter_devices(self):
        return self.is_admin

    def can_manage_devices(self):
        return self.is_super_admin

    def can_manage_users(self):
        return self.is_super_admin

    def can_view_logs(self):
        return self.is_super_admin
