import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=100, unique=True)),
                ('asin', models.CharField(blank=True, max_length=20, null=True)),
                ('name', models.CharField(blank=True, max_length=500, null=True)),
                ('name_source', models.CharField(blank=True, max_length=20, null=True)),
                ('legal_name', models.CharField(blank=True, max_length=500, null=True)),
                ('brand', models.CharField(blank=True, max_length=200, null=True)),
                ('upc_number', models.CharField(blank=True, max_length=50, null=True)),
                ('age_grade', models.CharField(blank=True, max_length=50, null=True)),
                ('product_description', models.TextField(blank=True, null=True)),
                ('sioc_status', models.CharField(blank=True, max_length=50, null=True)),
                ('pim_spec_status', models.CharField(blank=True, max_length=100, null=True)),
                ('product_dev_status', models.CharField(blank=True, max_length=100, null=True)),
                ('case_pack', models.IntegerField(blank=True, null=True)),
                ('package_length_cm', models.FloatField(blank=True, null=True)),
                ('package_width_cm', models.FloatField(blank=True, null=True)),
                ('package_height_cm', models.FloatField(blank=True, null=True)),
                ('package_weight_kg', models.FloatField(blank=True, null=True)),
                ('order_received', models.BooleanField(default=False)),
                ('vendor_central_setup', models.BooleanField(default=False)),
                ('stage_1_idea_considered', models.BooleanField(default=False)),
                ('stage_2_product_finalized', models.BooleanField(default=False)),
                ('stage_3a_pricing_submitted', models.BooleanField(default=False)),
                ('stage_3b_pricing_approved', models.BooleanField(default=False)),
                ('stage_4_product_listed', models.BooleanField(default=False)),
                ('stage_5_product_ordered', models.BooleanField(default=False)),
                ('stage_6_product_online', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'ordering': ['sku'],
            },
        ),
        migrations.CreateModel(
            name='StageEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stage', models.CharField(max_length=50)),
                ('source', models.CharField(max_length=20)),
                ('completed_at', models.DateTimeField()),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stage_events', to='integrator.item')),
            ],
            options={
                'ordering': ['completed_at', 'id'],
            },
        ),
    ]
