"""
Management command to seed the default device categories.
Safe to run repeatedly; existing tags are left untouched.
"""

from django.core.management.base import BaseCommand
from django.db import transaction


DEFAULT_TAGS = {
    '视频': ['摄像机', '录像机', '视频矩阵', '解码器', '编码器'],
    '音频': ['功放', '音箱', '话筒', '调音台', '音频处理器'],
    '网络': ['交换机', '路由器', '防火墙', '网关', '网络存储'],
}


class Command(BaseCommand):
    help = 'Seed default primary and secondary tags'

    def add_arguments(self, parser):
        parser.add_argument(
            '--quiet',
            action='store_true',
            help='Suppress individual tag output',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        from stockroom.inventory.models import PrimaryTag, SecondaryTag

        quiet = options['quiet']
        created_count = 0

        for primary_name, secondary_names in DEFAULT_TAGS.items():
            primary_tag, created = PrimaryTag.objects.get_or_create(name=primary_name)
            if created:
                created_count += 1
                if not quiet:
                    self.stdout.write(f"  Created: {primary_name}")

            for secondary_name in secondary_names:
                _, created = SecondaryTag.objects.get_or_create(
                    primary_tag=primary_tag,
                    name=secondary_name,
                )
                if created:
                    created_count += 1
                    if not quiet:
                        self.stdout.write(f"  Created: {primary_name} / {secondary_name}")
                elif not quiet:
                    self.stdout.write(f"  Exists: {primary_name} / {secondary_name}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Tags: {created_count} created, "
                f"{PrimaryTag.objects.count()} primary, {SecondaryTag.objects.count()} secondary total"
            )
        )
