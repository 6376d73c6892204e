"""Django signals for cache invalidation.

Event listings show current capacity, so check-in rows invalidate them too.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from checkins.caching import invalidate_event_listings
from checkins.models import CheckIn, Event


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate listings when an event is saved or deleted."""
    invalidate_event_listings()


@receiver([post_save, post_delete], sender=CheckIn)
def invalidate_capacity_cache(sender, instance, **kwargs):
    """Invalidate listings when a check-in changes an event's capacity."""
    invalidate_event_listings()
