"""
Supabase client factories.
Clients are created on first use so the app can start without Supabase credentials.
"""

import logging
from functools import lru_cache

from supabase import create_client, Client

from app.config import get_settings
from app.domain.models.base import BusinessRuleViolation


logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """Client authenticated with the anon key (user-facing auth calls)."""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise BusinessRuleViolation("Supabase is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
    logger.info("Creating Supabase client")
    return create_client(settings.supabase_url, settings.supabase_anon_key)


@lru_cache()
def get_supabase_admin_client() -> Client:
    """Client authenticated with the service role key (admin auth and storage calls)."""
    settings = get_settings()
    if not settings.has_service_role:
        raise BusinessRuleViolation("Supabase service role key is not configured (SUPABASE_SERVICE_KEY)")
    logger.info("Creating Supabase service role client")
    return create_client(settings.supabase_url, settings.supabase_service_key)
