"""
Static plan catalog.

Loaded once at import; there is no runtime mutation path.
"""
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Tuple

from .constants import PlanTier, CURRENCY
from .exceptions import UnknownPlanError


@dataclass(frozen=True)
class PlanDefinition:
    """A subscription plan priced in ZAR per month."""
    tier: PlanTier
    name: str
    price: Decimal
    monthly_posts: int
    crm_contacts: int
    features: Tuple[str, ...]

    def quota_summary(self):
        """Quota metadata carried back through the gateway callback."""
        return {
            'monthlyPosts': self.monthly_posts,
            'crmContacts': self.crm_contacts,
        }

    def to_dict(self):
        """Convert plan to dictionary for JSON serialization."""
        return {
            'tier': self.tier.value,
            'name': self.name,
            'price': f'{self.price:.2f}',
            'currency': CURRENCY,
            'monthly_posts': self.monthly_posts,
            'crm_contacts': self.crm_contacts,
            'features': list(self.features),
        }


PLAN_CATALOG = MappingProxyType({
    PlanTier.STARTER: PlanDefinition(
        tier=PlanTier.STARTER,
        name='Starter',
        price=Decimal('549'),
        monthly_posts=50,
        crm_contacts=1000,
        features=(
            'Unlimited Users',
            'Unlimited Social Accounts',
            '50 AI-Enhanced Posts/mo',
            '1,000 CRM Contacts',
            'Unified Inbox Access',
            'Basic Analytics',
            'Email Support',
        ),
    ),
    PlanTier.PROFESSIONAL: PlanDefinition(
        tier=PlanTier.PROFESSIONAL,
        name='Professional',
        price=Decimal('1499'),
        monthly_posts=250,
        crm_contacts=10000,
        features=(
            'Unlimited Users',
            'Unlimited Social Accounts',
            '250 AI-Enhanced Posts/mo',
            '10,000 CRM Contacts',
            'Unified Inbox Access',
            'Priority Support & Reports',
            'Advanced Analytics',
            'AI Content Assistant',
        ),
    ),
    PlanTier.BUSINESS: PlanDefinition(
        tier=PlanTier.BUSINESS,
        name='Business',
        price=Decimal('2849'),
        monthly_posts=1000,
        crm_contacts=100000,
        features=(
            'Unlimited Users',
            'Unlimited Social Accounts',
            '1,000 AI-Enhanced Posts/mo',
            '100,000 CRM Contacts',
            'Unified Inbox Access',
            'White-label & Dedicated Manager',
            'Custom Analytics & Dashboards',
            'Advanced AI Features',
            'Marketing Automation',
        ),
    ),
})


def resolve_tier(tier):
    """
    Resolve a tier key to a PlanTier.

    Args:
        tier (str or PlanTier): Tier key, case-insensitive

    Raises:
        UnknownPlanError: if the key is not a known tier
    """
    if isinstance(tier, PlanTier):
        return tier
    try:
        return PlanTier(str(tier or '').strip().lower())
    except ValueError:
        raise UnknownPlanError(tier, [t.value for t in PlanTier]) from None


def lookup(tier):
    """Return the PlanDefinition for a tier. Never falls back to a default."""
    return PLAN_CATALOG[resolve_tier(tier)]


def list_plans():
    return list(PLAN_CATALOG.values())
