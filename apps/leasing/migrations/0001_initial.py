import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Brand',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name_kr', models.CharField(max_length=100, verbose_name='브랜드명(한글)')),
                ('name_en', models.CharField(blank=True, max_length=100, verbose_name='브랜드명(영문)')),
                ('slug', models.SlugField(allow_unicode=True, max_length=120, unique=True, verbose_name='Slug')),
                ('is_domestic', models.BooleanField(default=True, verbose_name='국산 브랜드')),
                ('is_active', models.BooleanField(default=True, verbose_name='활성')),
                ('sort_order', models.PositiveIntegerField(default=999, verbose_name='정렬 순서')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='생성일')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='수정일')),
            ],
            options={
                'verbose_name': '브랜드',
                'verbose_name_plural': '브랜드',
                'ordering': ['sort_order', 'name_kr'],
            },
        ),
        migrations.CreateModel(
            name='MasterColor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('color_type', models.CharField(choices=[('EXTERIOR', '외장'), ('INTERIOR', '내장')], max_length=10, verbose_name='구분')),
                ('name', models.CharField(max_length=100, verbose_name='색상명')),
                ('hex_code', models.CharField(blank=True, max_length=7, verbose_name='색상 코드')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('is_active', models.BooleanField(default=True, verbose_name='활성')),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='master_colors', to='leasing.brand', verbose_name='브랜드')),
            ],
            options={
                'verbose_name': '마스터 색상',
                'verbose_name_plural': '마스터 색상',
                'ordering': ['sort_order', 'name'],
                'unique_together': {('brand', 'color_type', 'name')},
            },
        ),
        migrations.CreateModel(
            name='MasterOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='옵션명')),
                ('description', models.TextField(blank=True, verbose_name='설명')),
                ('category', models.CharField(blank=True, max_length=50, verbose_name='분류')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('is_active', models.BooleanField(default=True, verbose_name='활성')),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='master_options', to='leasing.brand', verbose_name='브랜드')),
            ],
            options={
                'verbose_name': '마스터 옵션',
                'verbose_name_plural': '마스터 옵션',
                'ordering': ['sort_order', 'name'],
                'unique_together': {('brand', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Vehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='차량명')),
                ('description', models.TextField(blank=True, verbose_name='설명')),
                ('category', models.CharField(choices=[('SEDAN', '세단'), ('SUV', 'SUV'), ('TRUCK', '트럭'), ('VAN', '밴'), ('EV', '전기차'), ('COMPACT', '경차'), ('HATCHBACK', '해치백'), ('COUPE', '쿠페'), ('CONVERTIBLE', '컨버터블')], default='SEDAN', max_length=20, verbose_name='차종')),
                ('fuel_types', models.JSONField(blank=True, default=list, help_text='예: ["가솔린", "하이브리드"]', verbose_name='연료')),
                ('drive_types', models.JSONField(blank=True, default=list, help_text='예: ["2WD", "AWD"]', verbose_name='구동 방식')),
                ('seating_capacity_min', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='최소 승차 인원')),
                ('seating_capacity_max', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='최대 승차 인원')),
                ('base_price', models.PositiveBigIntegerField(default=0, verbose_name='기본 차량가')),
                ('rent_prices', models.JSONField(blank=True, default=dict, help_text='{"rentPrice60_0": 450000, ...}', verbose_name='월 렌트료 표')),
                ('is_popular', models.BooleanField(default=False, verbose_name='인기 차량')),
                ('is_new', models.BooleanField(default=False, verbose_name='신차')),
                ('is_active', models.BooleanField(default=True, verbose_name='활성')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='생성일')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='수정일')),
                ('brand', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vehicles', to='leasing.brand', verbose_name='브랜드')),
            ],
            options={
                'verbose_name': '차량',
                'verbose_name_plural': '차량',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Color',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('color_type', models.CharField(choices=[('EXTERIOR', '외장'), ('INTERIOR', '내장')], max_length=10, verbose_name='구분')),
                ('name', models.CharField(max_length=100, verbose_name='색상명')),
                ('hex_code', models.CharField(blank=True, max_length=7, verbose_name='색상 코드')),
                ('price', models.PositiveIntegerField(default=0, verbose_name='추가 금액')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('is_available', models.BooleanField(default=True, verbose_name='선택 가능')),
                ('master', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='colors', to='leasing.mastercolor', verbose_name='마스터 색상')),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='colors', to='leasing.vehicle', verbose_name='차량')),
            ],
            options={
                'verbose_name': '색상',
                'verbose_name_plural': '색상',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Option',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='옵션명')),
                ('description', models.TextField(blank=True, verbose_name='설명')),
                ('category', models.CharField(blank=True, max_length=50, verbose_name='분류')),
                ('price', models.PositiveIntegerField(default=0, verbose_name='추가 금액')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('is_available', models.BooleanField(default=True, verbose_name='선택 가능')),
                ('master', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='options', to='leasing.masteroption', verbose_name='마스터 옵션')),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='leasing.vehicle', verbose_name='차량')),
            ],
            options={
                'verbose_name': '옵션',
                'verbose_name_plural': '옵션',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Trim',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='트림명')),
                ('description', models.TextField(blank=True, verbose_name='설명')),
                ('price', models.PositiveIntegerField(default=0, verbose_name='추가 금액')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='trims', to='leasing.vehicle', verbose_name='차량')),
            ],
            options={
                'verbose_name': '트림',
                'verbose_name_plural': '트림',
                'ordering': ['sort_order', 'price', 'name'],
            },
        ),
        migrations.CreateModel(
            name='TrimColor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('color', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='trim_colors', to='leasing.color', verbose_name='색상')),
                ('trim', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='trim_colors', to='leasing.trim', verbose_name='트림')),
            ],
            options={
                'verbose_name': '트림 색상',
                'verbose_name_plural': '트림 색상',
                'unique_together': {('trim', 'color')},
            },
        ),
        migrations.CreateModel(
            name='TrimOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_included', models.BooleanField(default=False, verbose_name='기본 포함')),
                ('price_override', models.PositiveIntegerField(blank=True, help_text='비워두면 옵션 기본 가격을 사용합니다', null=True, verbose_name='트림별 가격')),
                ('option', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='trim_options', to='leasing.option', verbose_name='옵션')),
                ('trim', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='trim_options', to='leasing.trim', verbose_name='트림')),
            ],
            options={
                'verbose_name': '트림 옵션',
                'verbose_name_plural': '트림 옵션',
                'unique_together': {('trim', 'option')},
            },
        ),
        migrations.AddField(
            model_name='trim',
            name='colors',
            field=models.ManyToManyField(blank=True, related_name='trims', through='leasing.TrimColor', to='leasing.color', verbose_name='선택 가능 색상'),
        ),
        migrations.AddField(
            model_name='trim',
            name='options',
            field=models.ManyToManyField(blank=True, related_name='trims', through='leasing.TrimOption', to='leasing.option', verbose_name='선택 가능 옵션'),
        ),
        migrations.CreateModel(
            name='HistoricalVehicle',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='차량명')),
                ('description', models.TextField(blank=True, verbose_name='설명')),
                ('category', models.CharField(choices=[('SEDAN', '세단'), ('SUV', 'SUV'), ('TRUCK', '트럭'), ('VAN', '밴'), ('EV', '전기차'), ('COMPACT', '경차'), ('HATCHBACK', '해치백'), ('COUPE', '쿠페'), ('CONVERTIBLE', '컨버터블')], default='SEDAN', max_length=20, verbose_name='차종')),
                ('fuel_types', models.JSONField(blank=True, default=list, help_text='예: ["가솔린", "하이브리드"]', verbose_name='연료')),
                ('drive_types', models.JSONField(blank=True, default=list, help_text='예: ["2WD", "AWD"]', verbose_name='구동 방식')),
                ('seating_capacity_min', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='최소 승차 인원')),
                ('seating_capacity_max', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='최대 승차 인원')),
                ('base_price', models.PositiveBigIntegerField(default=0, verbose_name='기본 차량가')),
                ('rent_prices', models.JSONField(blank=True, default=dict, help_text='{"rentPrice60_0": 450000, ...}', verbose_name='월 렌트료 표')),
                ('is_popular', models.BooleanField(default=False, verbose_name='인기 차량')),
                ('is_new', models.BooleanField(default=False, verbose_name='신차')),
                ('is_active', models.BooleanField(default=True, verbose_name='활성')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='정렬 순서')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='생성일')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='수정일')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('brand', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='leasing.brand', verbose_name='브랜드')),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical 차량',
                'verbose_name_plural': 'historical 차량',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
