from .supabase import SupabaseAuthAdminClient, SupabaseStorageClient

__all__ = ["SupabaseAuthAdminClient", "SupabaseStorageClient"]
