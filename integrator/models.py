from django.db import models


STAGE_FLAGS = (
    'order_received',
    'vendor_central_setup',
    'stage_1_idea_considered',
    'stage_2_product_finalized',
    'stage_3a_pricing_submitted',
    'stage_3b_pricing_approved',
    'stage_4_product_listed',
    'stage_5_product_ordered',
    'stage_6_product_online',
)


class Item(models.Model):
    sku = models.CharField(max_length=100, unique=True)
    asin = models.CharField(max_length=20, null=True, blank=True)

    name = models.CharField(max_length=500, null=True, blank=True)
    name_source = models.CharField(max_length=20, null=True, blank=True)
    legal_name = models.CharField(max_length=500, null=True, blank=True)
    brand = models.CharField(max_length=200, null=True, blank=True)
    upc_number = models.CharField(max_length=50, null=True, blank=True)
    age_grade = models.CharField(max_length=50, null=True, blank=True)
    product_description = models.TextField(null=True, blank=True)
    sioc_status = models.CharField(max_length=50, null=True, blank=True)
    pim_spec_status = models.CharField(max_length=100, null=True, blank=True)
    product_dev_status = models.CharField(max_length=100, null=True, blank=True)
    case_pack = models.IntegerField(null=True, blank=True)
    package_length_cm = models.FloatField(null=True, blank=True)
    package_width_cm = models.FloatField(null=True, blank=True)
    package_height_cm = models.FloatField(null=True, blank=True)
    package_weight_kg = models.FloatField(null=True, blank=True)

    order_received = models.BooleanField(default=False)
    vendor_central_setup = models.BooleanField(default=False)
    stage_1_idea_considered = models.BooleanField(default=False)
    stage_2_product_finalized = models.BooleanField(default=False)
    stage_3a_pricing_submitted = models.BooleanField(default=False)
    stage_3b_pricing_approved = models.BooleanField(default=False)
    stage_4_product_listed = models.BooleanField(default=False)
    stage_5_product_ordered = models.BooleanField(default=False)
    stage_6_product_online = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    # Touched by the reconciler only when a sync actually changes the row.
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['sku']

    def __str__(self):
        return f"{self.sku} ({self.name or 'unnamed'})"


class StageEvent(models.Model):
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='stage_events')
    stage = models.CharField(max_length=50)
    source = models.CharField(max_length=20)
    completed_at = models.DateTimeField()

    class Meta:
        ordering = ['completed_at', 'id']

    def __str__(self):
        return f"{self.item.sku}: {self.stage} via {self.source}"
