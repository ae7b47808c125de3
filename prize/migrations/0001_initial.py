import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Prize",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "image",
                    models.CharField(
                        blank=True,
                        help_text="Filesystem or CDN path to the prize image.",
                        max_length=512,
                    ),
                ),
                ("stock", models.PositiveIntegerField(default=0)),
                (
                    "probability",
                    models.FloatField(
                        default=1,
                        help_text="Relative selection weight; weights need not sum to 100.",
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-probability", "id"],
            },
        ),
        migrations.CreateModel(
            name="DrawRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("prize_id", models.BigIntegerField(db_index=True)),
                ("prize_name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.AddConstraint(
            model_name="prize",
            constraint=models.CheckConstraint(
                condition=models.Q(("probability__gte", 0)),
                name="prize_probability_non_negative",
            ),
        ),
    ]
