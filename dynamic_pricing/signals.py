"""
Signal handlers for auto-populating per-room-type pricing rules.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import RoomType, PricingRules


@receiver(post_save, sender=RoomType)
def create_room_type_pricing_rules(sender, instance, created, **kwargs):
    """
    When a room type is created, create an empty rules row so admin has
    something to edit. Empty rules price neutrally.
    """
    if created:
        PricingRules.objects.get_or_create(room_type=instance)
