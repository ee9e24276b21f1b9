"""
context.py
----------
CustomerContext: what the customer-facing reads need to know about the caller.
Anonymous callers get a context with no customer id and no blacklist flag.
"""

from dataclasses import dataclass
from typing import Optional

from .models import CustomerProfile


@dataclass(frozen=True)
class CustomerContext:
    customer_id: Optional[int] = None
    is_blacklisted: bool = False


ANONYMOUS = CustomerContext()


def customer_context_for(user):
    """Build a CustomerContext from request.user (may be anonymous)."""
    if user is None or not user.is_authenticated:
        return ANONYMOUS

    profile = CustomerProfile.objects.filter(user=user).first()
    if profile is None:
        return ANONYMOUS
    return CustomerContext(customer_id=profile.id, is_blacklisted=profile.is_blacklisted)
