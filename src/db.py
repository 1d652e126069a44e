from supabase import Client, create_client

from src.config import settings

# Service-role client: bypasses row-level security, so every query must be
# scoped by organization_id explicitly.
supabase: Client = create_client(settings.supabase_url, settings.supabase_service_role_key)
