"""
Flockbook test suite.

- integration/ - service and API tests per farm workflow, run with pytest-django
  against SQLite and eager Celery (core.settings_test)
"""
