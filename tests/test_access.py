"""
Role gating: anonymous users go to the login page, users without the
role get a 403.
"""

import pytest
from django.urls import reverse

pytestmark = pytest.mark.django_db

SUPER_ADMIN_ONLY = [
    'inventory:device_list',
    'inventory:log_list',
    'inventory:manage',
    'accounts:user_list',
    'accounts:user_create',
]
ENTRY_PAGES = ['inventory:entry', 'inventory:entry_count']
EVERYONE = ['dashboard', 'inventory:search']


@pytest.mark.parametrize('url_name', SUPER_ADMIN_ONLY + ENTRY_PAGES + EVERYONE)
def test_anonymous_is_sent_to_login(client, url_name):
    url = reverse(url_name)
    response = client.get(url)
    assert response.status_code == 302
    assert response.url.startswith(reverse('accounts:login'))
    assert 'next=' in response.url


@pytest.mark.parametrize('url_name', SUPER_ADMIN_ONLY + ENTRY_PAGES + EVERYONE)
def test_super_admin_can_open_everything(super_client, url_name):
    assert super_client.get(reverse(url_name)).status_code == 200


@pytest.mark.parametrize('url_name', SUPER_ADMIN_ONLY)
def test_admin_cannot_open_super_admin_pages(keeper_client, url_name):
    assert keeper_client.get(reverse(url_name)).status_code == 403


@pytest.mark.parametrize('url_name', ENTRY_PAGES + EVERYONE)
def test_admin_can_enter_and_search(keeper_client, url_name):
    assert keeper_client.get(reverse(url_name)).status_code == 200


@pytest.mark.parametrize('url_name', SUPER_ADMIN_ONLY + ENTRY_PAGES)
def test_plain_user_is_forbidden(user_client, url_name):
    assert user_client.get(reverse(url_name)).status_code == 403


@pytest.mark.parametrize('url_name', EVERYONE)
def test_plain_user_can_browse(user_client, url_name):
    assert user_client.get(reverse(url_name)).status_code == 200


def test_device_pages_require_super_admin(keeper_client, device):
    assert keeper_client.get(reverse('inventory:device_edit', args=[device.pk])).status_code == 403
    assert keeper_client.get(reverse('inventory:device_logs', args=[device.pk])).status_code == 403


def test_plain_user_cannot_delete_via_post(user_client, device):
    response = user_client.post(reverse('inventory:device_list'), {'intent': 'deleteDevice', 'device_id': device.pk})
    assert response.status_code == 403
    device.refresh_from_db()


def test_index_redirects_to_dashboard(client):
    response = client.get('/')
    assert response.status_code == 302
    assert response.url == reverse('dashboard')
