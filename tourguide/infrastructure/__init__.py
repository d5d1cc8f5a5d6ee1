"""Infrastructure adapters: persistence, email providers and notifications."""
