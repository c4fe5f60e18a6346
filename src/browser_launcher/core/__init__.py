"""Resolution engine, flag builder and process supervisor."""
