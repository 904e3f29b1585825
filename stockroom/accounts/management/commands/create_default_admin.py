"""
Management command to create the default super admin.
"""

from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = 'Create default super admin user (admin / admin123) if no users exist'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Reset admin password even if users exist',
        )
        parser.add_argument(
            '--username',
            type=str,
            default='admin',
            help='Admin username (default: admin)',
        )
        parser.add_argument(
            '--password',
            type=str,
            default='admin123',
            help='Admin password (default: admin123)',
        )

    def handle(self, *args, **options):
        from stockroom.accounts.models import User

        username = options['username'].strip().lower()
        password = options['password']
        force = options['force']

        if User.objects.exists() and not force:
            self.stdout.write(
                self.style.WARNING(
                    'Users already exist. Use --force to reset admin password.'
                )
            )
            return

        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                'is_staff': True,
                'is_superuser': True,
                'is_active': True,
                'role': User.Role.SUPER_ADMIN,
                'full_name': 'Administrator',
            }
        )

        if not created:
            user.is_staff = True
            user.is_superuser = True
            user.is_active = True
            user.role = User.Role.SUPER_ADMIN

        user.set_password(password)
        user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created default admin user: {username}'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Reset admin user password: {username}'))

        self.stdout.write(
            self.style.WARNING('Change the default password immediately!')
        )
