from supabase import create_client
from recap.errors import ConfigError
from recap.models import Subscription, WATCHLIST

SUBSCRIPTIONS_TABLE = "user_stocks"
SUBSCRIPTIONS_SELECT = "ticker, user_id, category, profiles:user_id (email)"


def get_supabase_client(url, key):
    # create_client validates the URL and key format up front
    try:
        return create_client(url, key)
    except Exception as e:
        raise ConfigError([f"Supabase client could not be created: {e}"]) from e


def _profile_email(row):
    profile = row.get("profiles")
    # PostgREST returns a list for to-many embeds
    if isinstance(profile, list):
        profile = profile[0] if profile else None
    if not profile:
        return None
    return profile.get("email")


def row_to_subscription(row):
    return Subscription(
        user_id=str(row.get("user_id")),
        ticker=row.get("ticker") or "",
        category=row.get("category") or WATCHLIST,
        email=_profile_email(row),
    )


class SupabaseSubscriptionSource:
    """
    Reads every subscription row joined with the owning user's email.
    Rows whose profile cannot be resolved come back with email=None.
    """

    def __init__(self, client):
        self.client = client

    def fetch_subscriptions(self):
        response = self.client.table(SUBSCRIPTIONS_TABLE).select(SUBSCRIPTIONS_SELECT).execute()
        return [row_to_subscription(row) for row in response.data or []]
