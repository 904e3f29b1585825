import pytest
from django.core.management import call_command

from stockroom.accounts.models import User
from stockroom.inventory.models import PrimaryTag, SecondaryTag

pytestmark = pytest.mark.django_db


def test_create_default_admin():
    call_command('create_default_admin')
    user = User.objects.get(username='admin')
    assert user.role == User.Role.SUPER_ADMIN
    assert user.is_superuser
    assert user.check_password('admin123')


def test_create_default_admin_skips_when_users_exist(plain_user):
    call_command('create_default_admin')
    assert not User.objects.filter(username='admin').exists()


def test_create_default_admin_force_resets_password():
    call_command('create_default_admin', password='first-pass')
    call_command('create_default_admin', password='second-pass', force=True)
    assert User.objects.get(username='admin').check_password('second-pass')


def test_seed_tags_is_idempotent():
    call_command('seed_tags', quiet=True)
    call_command('seed_tags', quiet=True)

    assert list(PrimaryTag.objects.values_list('name', flat=True)) == ['视频', '音频', '网络']
    assert SecondaryTag.objects.count() == 15
    assert list(
        SecondaryTag.objects.filter(primary_tag__name='网络').values_list('name', flat=True)
    ) == ['交换机', '路由器', '防火墙', '网关', '网络存储']
