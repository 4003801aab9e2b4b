"""Infrastructure adapters: persistence, refresh bus and realtime delivery."""
