"""Document-to-output assembly pipeline."""
