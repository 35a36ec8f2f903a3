from django.contrib import admin

from integrator.models import Item, StageEvent


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ('sku', 'asin', 'name', 'brand', 'stage_2_product_finalized',
                    'stage_4_product_listed', 'stage_5_product_ordered', 'updated_at')
    search_fields = ('sku', 'asin', 'name', 'upc_number')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(StageEvent)
class StageEventAdmin(admin.ModelAdmin):
    list_display = ('item', 'stage', 'source', 'completed_at')
    list_filter = ('stage', 'source')
