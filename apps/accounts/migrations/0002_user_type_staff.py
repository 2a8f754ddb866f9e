from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='user',
            name='user_type',
            field=models.CharField(
                choices=[('vendor', 'Vendor'), ('supplier', 'Supplier'), ('staff', 'Staff')],
                default='vendor',
                max_length=20,
            ),
        ),
    ]
