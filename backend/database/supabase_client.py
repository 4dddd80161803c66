"""Supabase client used for Auth admin operations."""
from typing import Optional
from supabase import create_client, Client
from backend.config import Config

"""
Supabase Table Schema:

CREATE TABLE freebets (
  id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
  user_id UUID NOT NULL REFERENCES auth.users(id),
  name TEXT NOT NULL,
  value DECIMAL(10,2) NOT NULL,
  min_odds DECIMAL(5,2) NOT NULL,
  expiry DATE NOT NULL,
  status TEXT NOT NULL DEFAULT 'active',
  extracted_value DECIMAL(10,2),
  created_at TIMESTAMP DEFAULT NOW(),
  updated_at TIMESTAMP DEFAULT NOW()
);

CREATE TABLE user_settings (
  id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
  user_id UUID UNIQUE NOT NULL REFERENCES auth.users(id),
  default_commission DECIMAL(5,2),
  auto_calculate BOOLEAN DEFAULT FALSE,
  theme TEXT,
  created_at TIMESTAMP DEFAULT NOW(),
  updated_at TIMESTAMP DEFAULT NOW()
);

Create index for faster queries:
CREATE INDEX idx_freebets_user_created ON freebets(user_id, created_at DESC);
"""

_client: Optional[Client] = None


def init_supabase() -> Client:
    """Initialize and return Supabase client."""
    global _client
    if _client is None:
        _client = create_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_KEY)
    return _client


def get_supabase_client() -> Client:
    """Get the Supabase client (alias for init_supabase)."""
    return init_supabase()
