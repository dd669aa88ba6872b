"""Shared external API clients."""

from camper_mcp.clients.resend import ResendClient, ResendClientError
from camper_mcp.clients.supabase_auth import SupabaseAuthClient, SupabaseAuthError

__all__ = [
    "ResendClient",
    "ResendClientError",
    "SupabaseAuthClient",
    "SupabaseAuthError",
]
