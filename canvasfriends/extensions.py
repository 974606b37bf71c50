"""Flask extensions for the application."""

from .assignments.services.notifier import ChangeNotifier

notifier = ChangeNotifier()
