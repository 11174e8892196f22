"""
Signals sent by the restriction engine.

``restriction_denied`` is sent once per denied write or association
mutation, whatever the enforcement mode. Receivers get ``record``,
``principal``, ``field_names`` and ``mode`` keyword arguments; the sender is
the record's model class.
"""

from django.dispatch import Signal

restriction_denied = Signal()
