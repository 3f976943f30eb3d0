"""Configuration: settings, database engine options and the Supabase client factory."""
