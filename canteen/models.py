from django.db import models
from django.contrib.auth.models import AbstractUser


# --- Choice constants ---

class UserRole(models.TextChoices):
    CUSTOMER = 'customer', 'Customer'
    ADMIN = 'admin', 'Admin'


class MenuCategory(models.TextChoices):
    SNACKS = 'snacks', 'Snacks'
    BEVERAGES = 'beverages', 'Beverages'
    SWEETS = 'sweets', 'Sweets'


class OrderType(models.TextChoices):
    INSTANT = 'instant', 'Instant'
    SCHEDULED = 'scheduled', 'Scheduled'


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.TextChoices):
    BKASH = 'bkash', 'bKash'
    NAGAD = 'nagad', 'Nagad'
    CARD = 'card', 'Card'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'


# --- Models ---

class User(AbstractUser):
    """Campus user; login is by email, username mirrors the email."""
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=20, choices=UserRole.choices, default=UserRole.CUSTOMER
    )
    name = models.CharField(max_length=255)
    department = models.CharField(max_length=100, default='Not Specified')
    designation = models.CharField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'canteen_user'

    def save(self, *args, **kwargs):
        if not self.username:
            self.username = self.email
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def __str__(self):
        return f'{self.name} <{self.email}>'


class MenuItem(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    price = models.FloatField()
    category = models.CharField(max_length=20, choices=MenuCategory.choices)
    image_url = models.CharField(max_length=500, blank=True, null=True)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'canteen_menu_item'
        ordering = ['id']

    def __str__(self):
        return self.name


class Order(models.Model):
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='orders'
    )
    order_type = models.CharField(max_length=20, choices=OrderType.choices)
    # Caller-chosen date string, kept as sent
    scheduled_date = models.CharField(max_length=64, blank=True, null=True)
    total_amount = models.FloatField()
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    order_status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )
    department = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'canteen_order'
        ordering = ['-created_at']

    def __str__(self):
        return f'Order #{self.pk} ({self.order_status})'


class OrderItem(models.Model):
    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='items'
    )
    # Deleting a menu item keeps the order history; the line loses its link
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='order_items'
    )
    quantity = models.PositiveIntegerField()
    price = models.FloatField(help_text='Menu item price at order time')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'canteen_order_item'
        ordering = ['id']

    @property
    def total(self):
        return self.price * self.quantity

    def __str__(self):
        return f'{self.quantity} x {self.menu_item_id} @ {self.price}'


class Payment(models.Model):
    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='payments'
    )
    amount = models.FloatField()
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    transaction_id = models.CharField(max_length=255, blank=True, null=True)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.COMPLETED
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'canteen_payment'
        ordering = ['-created_at']

    def __str__(self):
        return f'Payment #{self.pk} for order {self.order_id}'
