"""
Order lifecycle signals.

Sent by the lifecycle services after the transaction commits, with
``sender=Order`` and ``order=<Order>``. Extra keyword arguments:

- order_created: none
- order_payment_confirmed: none
- order_approved: ``license``, ``admin``
- order_rejected: ``admin``, ``reason``
- order_expired: none
"""
from django.dispatch import Signal

order_created = Signal()
order_payment_confirmed = Signal()
order_approved = Signal()
order_rejected = Signal()
order_expired = Signal()
