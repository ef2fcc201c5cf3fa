from django.apps import AppConfig


class PredictionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'predictions'
    verbose_name = 'Score predictions'

    def ready(self):
        # Scores predictions whenever a match is saved.
        import predictions.signals  # noqa: F401
