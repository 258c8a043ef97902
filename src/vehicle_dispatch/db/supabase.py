"""Supabase client for the dispatch store."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Query shapes used by persistence.database:
#
# # Compare-and-swap on a vehicle counter
# result = client.table('zip_codes') \
#     .update({'ambulance_count': 2}) \
#     .eq('id', zone_id) \
#     .eq('ambulance_count', 3) \
#     .execute()
# claimed = bool(result.data)
#
# # Append to the dispatch log
# result = client.table('dispatch_logs').insert({
#     'vehicle_type': 'ambulance',
#     'source_zip_code': '10001',
#     'dest_zip_code': '10003',
#     'path': ['10001', '10002', '10003'],
#     'distance': 8.0,
# }).execute()
