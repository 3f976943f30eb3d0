"""Image store adapter over Supabase Storage."""
