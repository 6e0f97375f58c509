from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserCreationForm, UserChangeForm

from . import services
from .models import MenuItem, Order, OrderItem, Payment, User


# --- Inlines ---

class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('price', 'created_at')


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ('created_at',)


# --- User (replace default auth User admin) ---

class CustomUserCreationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = User
        fields = UserCreationForm.Meta.fields + ('email', 'name', 'department', 'role')


class CustomUserChangeForm(UserChangeForm):
    class Meta:
        model = User
        fields = '__all__'


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    form = CustomUserChangeForm
    add_form = CustomUserCreationForm
    list_display = ('email', 'name', 'role', 'department', 'phone', 'is_active', 'created_at')
    list_filter = ('role', 'department', 'is_active')
    search_fields = ('email', 'name', 'phone')
    ordering = ('-created_at',)
    readonly_fields = ('created_at',)

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Campus profile', {
            'fields': ('name', 'role', 'department', 'designation', 'phone', 'created_at')
        }),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Campus profile', {
            'fields': ('email', 'name', 'department', 'role')
        }),
    )


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'available', 'created_at')
    list_filter = ('category', 'available')
    list_editable = ('available',)
    search_fields = ('name', 'description')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'user', 'order_type', 'order_status', 'payment_status',
        'payment_method', 'total_amount', 'department', 'created_at'
    )
    list_filter = ('order_status', 'payment_status', 'order_type', 'payment_method')
    search_fields = ('user__email', 'user__name', 'department')
    readonly_fields = ('total_amount', 'created_at', 'updated_at')
    inlines = [OrderItemInline, PaymentInline]

    def save_model(self, request, obj, form, change):
        """Status, payment status and date edits go through services.update_order (feed push included)."""
        tracked = {'order_status': 'orderStatus', 'payment_status': 'paymentStatus', 'scheduled_date': 'scheduledDate'}
        fields = [tracked[name] for name in form.changed_data if name in tracked]
        if not change or not fields:
            super().save_model(request, obj, form, change)
            return
        new_values = {name: getattr(obj, name) for name in tracked}
        obj.order_status = Order.objects.values_list('order_status', flat=True).get(pk=obj.pk)
        services.update_order(
            obj,
            order_status=new_values['order_status'],
            payment_status=new_values['payment_status'],
            scheduled_date=new_values['scheduled_date'],
            fields=fields,
        )


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'order', 'amount', 'payment_method', 'payment_status', 'transaction_id', 'created_at')
    list_filter = ('payment_method', 'payment_status')
    search_fields = ('transaction_id',)
    readonly_fields = ('created_at',)
