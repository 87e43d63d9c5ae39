#!/usr/bin/env python
"""
Django Management Command for seeding the home grids

Usage:
    python manage.py create_default_grids
    python manage.py create_default_grids --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from api import grid_service
from api.exceptions import StoreNotConfiguredError
from api.models import Grid


class Command(BaseCommand):
    help = 'Create the default home grids (one per tag) when no grid exists yet'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only show what would be created',
        )

    def handle(self, *args, **options):
        existing = Grid.objects.count()
        if existing:
            self.stdout.write(self.style.WARNING(f"⚠️  {existing} grade(s) já existem, nada a fazer"))
            return

        if options['dry_run']:
            self.stdout.write("🔍 DRY RUN - seriam criadas:")
            for grid in grid_service.DEFAULT_GRIDS:
                status = 'ativa' if grid['is_active'] else 'inativa'
                self.stdout.write(f"   • {grid['name']} [{grid['tag']}, {status}]")
            return

        try:
            created = grid_service.create_default_grids()
        except StoreNotConfiguredError as e:
            raise CommandError(str(e))
        for grid_id in created:
            grid = Grid.objects.get(pk=grid_id)
            self.stdout.write(self.style.SUCCESS(f"✨ Criada: {grid.name} [{grid.tag}]"))
        self.stdout.write(f"\n📊 {len(created)} grade(s) criada(s)")
