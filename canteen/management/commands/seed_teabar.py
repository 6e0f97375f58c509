"""
Management command: insert the starter menu and accounts when the tables are empty.
Safe to run multiple times.
"""
from django.core.management.base import BaseCommand

from canteen.hashers import hash_password
from canteen.models import MenuItem, User, UserRole

MENU_ITEMS = [
    ('Singara', 'Traditional Bengali samosa', 15, 'snacks'),
    ('Puri', 'Fried flatbread', 10, 'snacks'),
    ('Roll', 'Wrapped paratha with filling', 50, 'snacks'),
    ('Chop', 'Bengali cutlet', 20, 'snacks'),
    ('Chicken Cutlet', 'Fried chicken cutlet', 30, 'snacks'),
    ('Tea', 'Traditional milk tea', 10, 'beverages'),
    ('Coffee', 'Black coffee', 25, 'beverages'),
    ('Lassi', 'Yogurt drink', 30, 'beverages'),
    ('Rasgulla', 'Syrupy sponge dessert', 40, 'sweets'),
    ('Sandesh', 'Bengali sweet', 35, 'sweets'),
    ('Doi', 'Sweet yogurt', 25, 'sweets'),
]

USERS = [
    ('admin@baust.edu.bd', 'admin123', UserRole.ADMIN, 'Admin', 'Administration', '+880123456789'),
    ('mrittika@baust.edu.bd', 'customer123', UserRole.CUSTOMER, 'Mrittika', 'CSE', '+880198765432'),
    ('student@baust.edu.bd', 'student123', UserRole.CUSTOMER, 'Student', 'EEE', '+880187654321'),
]


class Command(BaseCommand):
    help = 'Seed menu items and starter users when their tables are empty'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only print what would be created, do not save',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        self._seed_menu(dry_run)
        self._seed_users(dry_run)

    def _seed_menu(self, dry_run):
        if MenuItem.objects.exists():
            self.stdout.write(self.style.SUCCESS('Menu already seeded.'))
            return
        if dry_run:
            for name, _, price, category in MENU_ITEMS:
                self.stdout.write(f'Would create menu item: {name} ({category}) {price}')
            return
        MenuItem.objects.bulk_create([
            MenuItem(name=name, description=description, price=price, category=category, available=True)
            for name, description, price, category in MENU_ITEMS
        ])
        self.stdout.write(self.style.SUCCESS(f'Created {len(MENU_ITEMS)} menu item(s).'))

    def _seed_users(self, dry_run):
        if User.objects.exists():
            self.stdout.write(self.style.SUCCESS('Users already seeded.'))
            return
        if dry_run:
            for email, _, role, *_rest in USERS:
                self.stdout.write(f'Would create user: {email} ({role})')
            return
        for email, password, role, name, department, phone in USERS:
            User.objects.create(
                username=email,
                email=email,
                password=hash_password(password),
                role=role,
                name=name,
                department=department,
                phone=phone,
                is_staff=(role == UserRole.ADMIN),
                is_superuser=(role == UserRole.ADMIN),
            )
        self.stdout.write(self.style.SUCCESS(f'Created {len(USERS)} user(s).'))
