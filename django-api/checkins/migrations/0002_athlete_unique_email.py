from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("checkins", "0001_initial"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="athlete",
            constraint=models.UniqueConstraint(
                condition=models.Q(("email__isnull", False), models.Q(("email", ""), _negated=True)),
                fields=("email",),
                name="checkins_unique_athlete_email",
            ),
        ),
    ]
